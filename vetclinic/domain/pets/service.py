"""Pet service - Business logic for pet records"""

import logging
from typing import Optional

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ...cache import build_list_key, cache, invalidate, ttl_for
from ...database import new_session
from ...errors import BusinessRuleError, NotFoundError, database_errors
from ...models import Pet
from ...shared.pagination import PageParams, fetch_page
from ...shared.status_manager import HEALTH_STATUS_CONFIGS
from ...shared.validators import optional_filter, validate_animal_type, validate_health_status
from ..schedules.service import resolve_schedule_fields
from .repository import PetRepository
from .schemas import PetCreate, PetResponse, PetWrite

logger = logging.getLogger(__name__)

RESOURCE = "ho-so-thu"


def _serialize(pet: Pet) -> dict:
    return PetResponse.from_model(pet, schedule_limit=1).model_dump(mode="json")


def _load_stats() -> dict[str, int]:
    with new_session() as db:
        counts = PetRepository.count_by_status(db)
    stats = {code: 0 for code in HEALTH_STATUS_CONFIGS}
    stats.update(counts)
    return stats


class PetService:
    """Service layer for pet business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PetRepository()

    async def list_pets(
        self,
        params: PageParams,
        trang_thai: Optional[str] = None,
        loai: Optional[str] = None,
    ) -> dict:
        """One page of pets plus the number of pets per health status"""
        trang_thai = optional_filter(trang_thai, validate_health_status, "Trạng thái sức khỏe không hợp lệ")
        loai = optional_filter(loai, validate_animal_type, "Loại thú cưng không hợp lệ")

        cache_key = build_list_key(
            RESOURCE, {**params.cache_key_parts(), "trangThai": trang_thai, "loai": loai}
        )
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        with database_errors("Có lỗi xảy ra khi lấy danh sách hồ sơ thú"):
            items, pagination = await fetch_page(
                lambda db: self.repo.search_query(db, params.search, trang_thai, loai), params, _serialize
            )
            stats = await run_in_threadpool(_load_stats)

        result = {"items": items, "pagination": pagination.model_dump(), "stats": stats}
        cache.set(cache_key, result, ttl_for(RESOURCE))
        return result

    def get_pet(self, ma_ho_so: str) -> Pet:
        with database_errors("Lỗi server khi lấy thông tin hồ sơ"):
            pet = self.repo.get_pet(self.db, ma_ho_so)
        if not pet:
            raise NotFoundError("Không tìm thấy hồ sơ thú cưng")
        return pet

    def get_pet_response(self, ma_ho_so: str) -> PetResponse:
        """Pet with its owner and every schedule, most recent exam first"""
        pet = self.get_pet(ma_ho_so)
        with database_errors("Lỗi server khi lấy thông tin hồ sơ"):
            return PetResponse.from_model(pet)

    def create_pet(self, data: PetCreate) -> PetResponse:
        schedule_fields = resolve_schedule_fields(data.lichTheoDoi) if data.lichTheoDoi else None

        with database_errors("Có lỗi xảy ra khi tạo hồ sơ thú"):
            owner = self.repo.get_owner(self.db, data.maKhachHang)
        if not owner:
            raise NotFoundError("Không tìm thấy khách hàng")

        with database_errors("Có lỗi xảy ra khi tạo hồ sơ thú"):
            pet = self.repo.create_pet(
                self.db,
                schedule_fields=schedule_fields,
                ten_thu=data.tenThu,
                loai=data.loai,
                trang_thai=data.trangThai,
                ma_khach_hang=data.maKhachHang,
            )
            response = PetResponse.from_model(pet)

        logger.info(f"🐾 Created pet {pet.ma_ho_so} ({pet.ten_thu}) for customer {owner.ma_khach_hang}")
        invalidate(RESOURCE)
        return response

    def update_pet(self, ma_ho_so: str, data: PetWrite) -> PetResponse:
        pet = self.get_pet(ma_ho_so)
        with database_errors("Lỗi server khi cập nhật hồ sơ"):
            pet = self.repo.replace_pet(
                self.db, pet, ten_thu=data.tenThu, loai=data.loai, trang_thai=data.trangThai
            )
            response = PetResponse.from_model(pet)

        invalidate(RESOURCE)
        return response

    def delete_pet(self, ma_ho_so: str) -> None:
        """Delete a pet record; blocked while it still has schedules"""
        pet = self.get_pet(ma_ho_so)
        with database_errors("Lỗi server khi xóa hồ sơ"):
            if self.repo.count_schedules(self.db, ma_ho_so) > 0:
                raise BusinessRuleError(
                    "Không thể xóa hồ sơ có lịch khám. Vui lòng xóa tất cả lịch khám trước."
                )
            self.repo.delete_pet(self.db, pet)

        logger.info(f"🗑️ Deleted pet {ma_ho_so}")
        invalidate(RESOURCE)
