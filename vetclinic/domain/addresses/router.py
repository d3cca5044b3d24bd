"""Address router - FastAPI endpoints for address (xã) operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.pagination import PageParams
from ...shared.responses import success
from .schemas import AddressWrite
from .service import AddressService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/xa", tags=["Addresses"])


def get_address_service(db: Session = Depends(get_db)) -> AddressService:
    """Dependency injection for AddressService"""
    return AddressService(db)


@router.get("")
async def list_addresses(
    search: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    service: AddressService = Depends(get_address_service),
):
    """List addresses with search and pagination"""
    result = await service.list_addresses(PageParams.from_query(search, page, limit))
    return success(result["items"], pagination=result["pagination"])


@router.post("")
async def create_address(
    data: AddressWrite,
    service: AddressService = Depends(get_address_service),
):
    """Create a new address"""
    address = service.create_address(data)
    return success(address, "Tạo xã thành công")


@router.get("/{ma_xa}")
async def get_address(
    ma_xa: str,
    service: AddressService = Depends(get_address_service),
):
    """Get a specific address with its customer count"""
    return success(service.get_address_response(ma_xa))


@router.put("/{ma_xa}")
async def update_address(
    ma_xa: str,
    data: AddressWrite,
    service: AddressService = Depends(get_address_service),
):
    """Replace an address"""
    address = service.update_address(ma_xa, data)
    return success(address, "Cập nhật xã thành công")


@router.delete("/{ma_xa}")
async def delete_address(
    ma_xa: str,
    service: AddressService = Depends(get_address_service),
):
    """Delete an address that no customer references"""
    service.delete_address(ma_xa)
    return success(None, "Xóa xã thành công")
