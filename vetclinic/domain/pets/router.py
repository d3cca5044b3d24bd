"""Pet router - FastAPI endpoints for pet record (hồ sơ thú) operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.pagination import PageParams
from ...shared.responses import created, success
from .schemas import PetCreate, PetWrite
from .service import PetService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ho-so-thu", tags=["Pets"])


def get_pet_service(db: Session = Depends(get_db)) -> PetService:
    """Dependency injection for PetService"""
    return PetService(db)


@router.get("")
async def list_pets(
    search: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    trangThai: Optional[str] = Query(None),
    loai: Optional[str] = Query(None),
    service: PetService = Depends(get_pet_service),
):
    """List pets with owner, latest schedule and per-status counts"""
    result = await service.list_pets(PageParams.from_query(search, page, limit), trangThai, loai)
    return success(result["items"], pagination=result["pagination"], stats=result["stats"])


@router.post("")
async def create_pet(
    data: PetCreate,
    service: PetService = Depends(get_pet_service),
):
    """Create a pet record, optionally with its first follow-up schedule"""
    pet = service.create_pet(data)
    return created(pet, "Tạo hồ sơ thú thành công")


@router.get("/{ma_ho_so}")
async def get_pet(
    ma_ho_so: str,
    service: PetService = Depends(get_pet_service),
):
    return success(service.get_pet_response(ma_ho_so))


@router.put("/{ma_ho_so}")
async def update_pet(
    ma_ho_so: str,
    data: PetWrite,
    service: PetService = Depends(get_pet_service),
):
    pet = service.update_pet(ma_ho_so, data)
    return success(pet, "Cập nhật hồ sơ thành công")


@router.delete("/{ma_ho_so}")
async def delete_pet(
    ma_ho_so: str,
    service: PetService = Depends(get_pet_service),
):
    service.delete_pet(ma_ho_so)
    return success(None, "Xóa hồ sơ thành công")
