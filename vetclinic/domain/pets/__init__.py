"""Pet domain - pet records (hồ sơ thú)"""

from .router import router

__all__ = ["router"]
