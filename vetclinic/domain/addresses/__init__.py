"""Address domain - Xã records referenced by customers"""

from .router import router

__all__ = ["router"]
