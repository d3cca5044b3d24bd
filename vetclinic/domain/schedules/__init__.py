"""Schedule domain - examinations and follow-up visits"""

from .router import pet_schedules_router, router

__all__ = ["router", "pet_schedules_router"]
