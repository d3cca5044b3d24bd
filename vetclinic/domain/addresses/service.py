"""Address service - Business logic for address operations"""

import logging

from sqlalchemy.orm import Session

from ...cache import build_list_key, cache, invalidate, ttl_for
from ...errors import BusinessRuleError, NotFoundError, database_errors
from ...models import Address
from ...shared.pagination import PageParams, fetch_page
from .repository import AddressRepository
from .schemas import AddressResponse, AddressWrite

logger = logging.getLogger(__name__)

RESOURCE = "xa"


def _serialize_row(row) -> dict:
    address, customer_count = row
    return AddressResponse.from_model(address, customer_count or 0).model_dump(mode="json")


class AddressService:
    """Service layer for address business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AddressRepository()

    async def list_addresses(self, params: PageParams) -> dict:
        """One page of addresses plus pagination summary (cached)"""
        cache_key = build_list_key(RESOURCE, params.cache_key_parts())
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        with database_errors("Lỗi khi tải danh sách xã"):
            items, pagination = await fetch_page(
                lambda db: self.repo.search_query(db, params.search), params, _serialize_row
            )

        result = {"items": items, "pagination": pagination.model_dump()}
        cache.set(cache_key, result, ttl_for(RESOURCE))
        return result

    def get_address(self, ma_xa: str) -> Address:
        with database_errors("Lỗi khi tải thông tin xã"):
            address = self.repo.get_address(self.db, ma_xa)
        if not address:
            raise NotFoundError("Không tìm thấy xã")
        return address

    def get_address_response(self, ma_xa: str) -> AddressResponse:
        address = self.get_address(ma_xa)
        with database_errors("Lỗi khi tải thông tin xã"):
            customer_count = self.repo.count_customers(self.db, ma_xa)
        return AddressResponse.from_model(address, customer_count)

    def create_address(self, data: AddressWrite) -> AddressResponse:
        with database_errors("Lỗi khi tạo xã"):
            address = self.repo.create_address(self.db, data.tenXa)
        logger.info(f"📥 Created address {address.ma_xa} ({address.ten_xa})")
        invalidate(RESOURCE)
        return AddressResponse.from_model(address)

    def update_address(self, ma_xa: str, data: AddressWrite) -> AddressResponse:
        address = self.get_address(ma_xa)
        with database_errors("Lỗi khi cập nhật xã"):
            address = self.repo.update_address(self.db, address, data.tenXa)
            customer_count = self.repo.count_customers(self.db, ma_xa)
        invalidate(RESOURCE)
        return AddressResponse.from_model(address, customer_count)

    def delete_address(self, ma_xa: str) -> None:
        """Delete an address; blocked while any customer references it"""
        address = self.get_address(ma_xa)

        with database_errors("Lỗi khi xóa xã"):
            customer_count = self.repo.count_customers(self.db, ma_xa)
            if customer_count > 0:
                logger.warning(f"⚠️ Refused to delete address {ma_xa}: {customer_count} customer(s) reference it")
                raise BusinessRuleError("Không thể xóa xã này vì đang được sử dụng bởi khách hàng")
            self.repo.delete_address(self.db, address)

        logger.info(f"🗑️ Deleted address {ma_xa}")
        invalidate(RESOURCE)

    def list_all(self) -> list[Address]:
        with database_errors("Lỗi khi tải danh sách xã"):
            return self.repo.list_all(self.db)
