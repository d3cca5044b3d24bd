"""Customer router - FastAPI endpoints for customer (khách hàng) operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.pagination import PageParams
from ...shared.responses import created, success
from .schemas import CustomerWrite
from .service import CustomerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/khach-hang", tags=["Customers"])


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency injection for CustomerService"""
    return CustomerService(db)


@router.get("")
async def list_customers(
    search: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    maXa: Optional[str] = Query(None),
    service: CustomerService = Depends(get_customer_service),
):
    """List customers with their address and pets"""
    result = await service.list_customers(PageParams.from_query(search, page, limit), maXa or None)
    return success(result["items"], pagination=result["pagination"])


@router.post("")
async def create_customer(
    data: CustomerWrite,
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.create_customer(data)
    return created(customer, "Tạo khách hàng thành công")


@router.get("/{ma_khach_hang}")
async def get_customer(
    ma_khach_hang: str,
    service: CustomerService = Depends(get_customer_service),
):
    return success(service.get_customer_response(ma_khach_hang))


@router.put("/{ma_khach_hang}")
async def update_customer(
    ma_khach_hang: str,
    data: CustomerWrite,
    service: CustomerService = Depends(get_customer_service),
):
    """Full replace: optional fields omitted from the body are cleared"""
    customer = service.update_customer(ma_khach_hang, data)
    return success(customer, "Cập nhật khách hàng thành công")


@router.delete("/{ma_khach_hang}")
async def delete_customer(
    ma_khach_hang: str,
    service: CustomerService = Depends(get_customer_service),
):
    service.delete_customer(ma_khach_hang)
    return success(None, "Xóa khách hàng thành công")
