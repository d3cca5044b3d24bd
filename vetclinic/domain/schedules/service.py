"""Schedule service - Business logic for examination / follow-up schedules"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...cache import build_list_key, cache, invalidate, ttl_for
from ...errors import BadRequestError, NotFoundError, database_errors
from ...models import Pet, Schedule
from ...shared.pagination import PageParams, fetch_page
from ...shared.validators import optional_filter, validate_exam_status
from ...utils.date_calculator import calculate_days_difference, calculate_follow_up_date
from .repository import ScheduleRepository
from .schemas import ScheduleCreate, ScheduleResponse, ScheduleWrite

logger = logging.getLogger(__name__)

RESOURCE = "lich-kham"
PET_NOT_FOUND_MESSAGE = "Không tìm thấy hồ sơ thú cưng"
DATE_ORDER_MESSAGE = "Ngày tái khám phải sau ngày khám"


def resolve_schedule_fields(data: ScheduleWrite, derive_follow_up: bool = True) -> dict:
    """
    Validate a schedule body and return the column values to store.

    When ``derive_follow_up`` is set and no follow-up date is given, a positive
    ``soNgay`` yields one; a missing ``soNgay`` is computed from the two dates.

    Raises:
        BadRequestError: Missing exam date / status, or follow-up not after exam
    """
    if data.ngayKham is None or data.trangThaiKham is None:
        raise BadRequestError("Ngày khám và trạng thái khám là bắt buộc")

    follow_up = data.ngayTaiKham
    days = data.soNgay

    if derive_follow_up and follow_up is None and days:
        follow_up = calculate_follow_up_date(data.ngayKham, days)

    if follow_up is not None and follow_up <= data.ngayKham:
        raise BadRequestError(DATE_ORDER_MESSAGE)

    if days is None:
        days = calculate_days_difference(data.ngayKham, follow_up) if follow_up else 0

    return {
        "ngay_kham": data.ngayKham,
        "ngay_tai_kham": follow_up,
        "so_ngay": days or 0,
        "trang_thai_kham": data.trangThaiKham,
        "ghi_chu": data.ghiChu,
    }


def _serialize(schedule: Schedule) -> dict:
    return ScheduleResponse.from_model(schedule).model_dump(mode="json")


class ScheduleService:
    """Service layer for schedule business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()

    async def list_schedules(
        self,
        params: PageParams,
        trang_thai_kham: Optional[str] = None,
        ma_ho_so: Optional[str] = None,
    ) -> dict:
        trang_thai_kham = optional_filter(trang_thai_kham, validate_exam_status, "Trạng thái khám không hợp lệ")

        cache_key = build_list_key(
            RESOURCE, {**params.cache_key_parts(), "trangThaiKham": trang_thai_kham, "maHoSo": ma_ho_so}
        )
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        with database_errors("Có lỗi xảy ra khi lấy danh sách lịch khám"):
            items, pagination = await fetch_page(
                lambda db: self.repo.search_query(db, params.search, trang_thai_kham, ma_ho_so),
                params,
                _serialize,
            )

        result = {"items": items, "pagination": pagination.model_dump()}
        cache.set(cache_key, result, ttl_for(RESOURCE))
        return result

    def _get_pet(self, ma_ho_so: Optional[str]) -> Pet:
        with database_errors("Có lỗi xảy ra khi lấy thông tin hồ sơ thú"):
            pet = self.repo.get_pet(self.db, ma_ho_so) if ma_ho_so else None
        if not pet:
            raise NotFoundError(PET_NOT_FOUND_MESSAGE)
        return pet

    def get_schedule(self, schedule_id: int) -> Schedule:
        with database_errors("Có lỗi xảy ra khi lấy thông tin lịch khám"):
            schedule = self.repo.get_schedule(self.db, schedule_id)
        if not schedule:
            raise NotFoundError("Không tìm thấy lịch khám")
        return schedule

    def get_schedule_response(self, schedule_id: int) -> ScheduleResponse:
        schedule = self.get_schedule(schedule_id)
        with database_errors("Có lỗi xảy ra khi lấy thông tin lịch khám"):
            return ScheduleResponse.from_model(schedule)

    def list_for_pet(self, ma_ho_so: str) -> list[ScheduleResponse]:
        """All schedules of one pet, most recent exam first"""
        self._get_pet(ma_ho_so)
        with database_errors("Lỗi server khi lấy danh sách lịch theo dõi"):
            return [ScheduleResponse.from_model(s) for s in self.repo.list_for_pet(self.db, ma_ho_so)]

    def create_schedule(self, ma_ho_so: Optional[str], data: ScheduleWrite) -> ScheduleResponse:
        fields = resolve_schedule_fields(data)
        pet = self._get_pet(ma_ho_so)

        with database_errors("Lỗi server khi tạo lịch theo dõi"):
            schedule = self.repo.create_schedule(self.db, pet, **fields)
            response = ScheduleResponse.from_model(schedule)

        logger.info(f"📅 Created schedule {schedule.id} for pet {pet.ma_ho_so} on {fields['ngay_kham']:%Y-%m-%d}")
        invalidate(RESOURCE)
        return response

    def create_from_body(self, data: ScheduleCreate) -> ScheduleResponse:
        """``POST /api/lich-kham``: the pet code is part of the body"""
        if not data.maHoSo:
            raise BadRequestError("Mã hồ sơ là bắt buộc")
        return self.create_schedule(data.maHoSo, data)

    def update_schedule(self, schedule_id: int, data: ScheduleWrite) -> ScheduleResponse:
        fields = resolve_schedule_fields(data, derive_follow_up=False)
        schedule = self.get_schedule(schedule_id)

        with database_errors("Có lỗi xảy ra khi cập nhật lịch khám"):
            schedule = self.repo.replace_schedule(self.db, schedule, **fields)
            response = ScheduleResponse.from_model(schedule)

        invalidate(RESOURCE)
        return response

    def delete_schedule(self, schedule_id: int) -> None:
        schedule = self.get_schedule(schedule_id)
        with database_errors("Có lỗi xảy ra khi xóa lịch khám"):
            self.repo.delete_schedule(self.db, schedule)

        logger.info(f"🗑️ Deleted schedule {schedule_id}")
        invalidate(RESOURCE)
