"""Customer service - Business logic for customer operations"""

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...cache import build_list_key, cache, invalidate, ttl_for
from ...errors import BusinessRuleError, ConflictError, NotFoundError, database_errors
from ...models import Customer
from ...shared.pagination import PageParams, fetch_page
from .repository import CustomerRepository
from .schemas import CustomerResponse, CustomerWrite

logger = logging.getLogger(__name__)

RESOURCE = "khach-hang"
DUPLICATE_PHONE_MESSAGE = "Số điện thoại đã tồn tại trong hệ thống"


def _serialize(customer: Customer) -> dict:
    return CustomerResponse.from_model(customer).model_dump(mode="json")


class CustomerService:
    """Service layer for customer business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository()

    async def list_customers(self, params: PageParams, ma_xa: Optional[str] = None) -> dict:
        cache_key = build_list_key(RESOURCE, {**params.cache_key_parts(), "maXa": ma_xa})
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        with database_errors("Có lỗi xảy ra khi lấy danh sách khách hàng"):
            items, pagination = await fetch_page(
                lambda db: self.repo.search_query(db, params.search, ma_xa), params, _serialize
            )

        result = {"items": items, "pagination": pagination.model_dump()}
        cache.set(cache_key, result, ttl_for(RESOURCE))
        return result

    def get_customer(self, ma_khach_hang: str) -> Customer:
        with database_errors("Có lỗi xảy ra khi lấy thông tin khách hàng"):
            customer = self.repo.get_customer(self.db, ma_khach_hang)
        if not customer:
            raise NotFoundError("Không tìm thấy khách hàng")
        return customer

    def get_customer_response(self, ma_khach_hang: str) -> CustomerResponse:
        customer = self.get_customer(ma_khach_hang)
        with database_errors("Có lỗi xảy ra khi lấy thông tin khách hàng"):
            return CustomerResponse.from_model(customer)

    def _check_references(self, data: CustomerWrite, exclude: Optional[str] = None) -> None:
        if data.maXa and not self.repo.address_exists(self.db, data.maXa):
            raise NotFoundError("Không tìm thấy xã")
        if self.repo.get_by_phone(self.db, data.soDienThoai, exclude=exclude):
            raise ConflictError(DUPLICATE_PHONE_MESSAGE)

    @contextmanager
    def _phone_conflicts(self):
        """Unique phone constraint hit by a concurrent write becomes a 409"""
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Phone conflict on commit: {e.orig}")
            raise ConflictError(DUPLICATE_PHONE_MESSAGE) from e

    @staticmethod
    def _fields(data: CustomerWrite) -> dict:
        return {
            "ten_khach_hang": data.tenKhachHang,
            "so_dien_thoai": data.soDienThoai,
            "dia_chi": data.diaChi,
            "ma_xa": data.maXa,
        }

    def create_customer(self, data: CustomerWrite) -> CustomerResponse:
        logger.info(f"📥 Creating customer {data.tenKhachHang}")
        with database_errors("Có lỗi xảy ra khi tạo khách hàng"):
            self._check_references(data)
            with self._phone_conflicts():
                customer = self.repo.create_customer(self.db, **self._fields(data))
            response = CustomerResponse.from_model(customer)

        invalidate(RESOURCE)
        return response

    def update_customer(self, ma_khach_hang: str, data: CustomerWrite) -> CustomerResponse:
        customer = self.get_customer(ma_khach_hang)
        with database_errors("Có lỗi xảy ra khi cập nhật khách hàng"):
            self._check_references(data, exclude=ma_khach_hang)
            with self._phone_conflicts():
                customer = self.repo.replace_customer(self.db, customer, **self._fields(data))
            response = CustomerResponse.from_model(customer)

        invalidate(RESOURCE)
        return response

    def delete_customer(self, ma_khach_hang: str) -> None:
        """Delete a customer; blocked while the customer still owns pets"""
        customer = self.get_customer(ma_khach_hang)
        with database_errors("Có lỗi xảy ra khi xóa khách hàng"):
            if customer.pets:
                raise BusinessRuleError(
                    "Không thể xóa khách hàng có thú cưng. Vui lòng xóa tất cả hồ sơ thú cưng trước."
                )
            self.repo.delete_customer(self.db, customer)

        logger.info(f"🗑️ Deleted customer {ma_khach_hang}")
        invalidate(RESOURCE)

    def list_all(self) -> list[Customer]:
        with database_errors("Có lỗi xảy ra khi lấy danh sách khách hàng"):
            return self.repo.list_all(self.db)
