"""Customer domain - pet owners"""

from .router import router

__all__ = ["router"]
