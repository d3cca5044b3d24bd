"""Cache monitoring endpoints used by the /admin/cache page"""

import logging

from fastapi import APIRouter, Depends

from ..auth import get_current_user
from ..cache import cache, clear_all, get_cache_stats
from ..shared.responses import success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cache", tags=["Cache"], dependencies=[Depends(get_current_user)])


@router.get("/stats")
async def cache_stats():
    return success(get_cache_stats())


@router.post("/clear")
async def clear_cache():
    """Drop every cached list and reset the counters"""
    deleted = clear_all()
    cache.reset_stats()
    logger.info(f"🧹 Cache cleared ({deleted} keys)")
    return success({"deleted": deleted}, "Đã xóa bộ nhớ đệm")
