"""Schedule domain schemas - Pydantic models for validation"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_exam_status
from ...utils.date_calculator import parse_datetime


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored datetimes are naive UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_date_field(v, message: str) -> Optional[datetime]:
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    parsed = parse_datetime(v)
    if parsed is None:
        raise ValueError(message)
    return to_naive_utc(parsed)


class ScheduleWrite(BaseModel):
    """
    Body for creating or replacing a schedule.

    ``ngayKham`` and ``trangThaiKham`` are required; their absence is reported
    by the service with a single combined message.
    """

    ngayKham: Optional[datetime] = None
    ngayTaiKham: Optional[datetime] = None
    soNgay: Optional[int] = None
    trangThaiKham: Optional[str] = None
    ghiChu: Optional[str] = None

    @field_validator("ngayKham", mode="before")
    @classmethod
    def validate_exam_date(cls, v):
        return _parse_date_field(v, "Ngày khám không hợp lệ")

    @field_validator("ngayTaiKham", mode="before")
    @classmethod
    def validate_follow_up_date(cls, v):
        return _parse_date_field(v, "Ngày tái khám không hợp lệ")

    @field_validator("soNgay", mode="before")
    @classmethod
    def validate_day_count(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, bool):
            raise ValueError("Số ngày không hợp lệ")
        try:
            days = int(v)
        except (TypeError, ValueError):
            raise ValueError("Số ngày không hợp lệ") from None
        if days < 0 or (isinstance(v, float) and not v.is_integer()):
            raise ValueError("Số ngày không hợp lệ")
        return days

    @field_validator("trangThaiKham", mode="before")
    @classmethod
    def validate_status(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return validate_exam_status(str(v).strip())

    @field_validator("ghiChu", mode="before")
    @classmethod
    def strip_note(cls, v):
        if v is None:
            return None
        value = str(v).strip()
        return value or None


class ScheduleCreate(ScheduleWrite):
    """Body for ``POST /api/lich-kham``: the owning pet is named in the body"""

    maHoSo: Optional[str] = None

    @field_validator("maHoSo", mode="before")
    @classmethod
    def strip_code(cls, v):
        if v is None:
            return None
        value = str(v).strip()
        return value or None


class OwnerSummary(BaseModel):
    maKhachHang: str
    tenKhachHang: str
    soDienThoai: str


class PetSummary(BaseModel):
    maHoSo: str
    tenThu: str
    loai: str
    trangThai: str
    khachHang: Optional[OwnerSummary] = None


class ScheduleResponse(BaseModel):
    """Schema for schedule response"""

    id: int
    maHoSo: str
    ngayKham: datetime
    ngayTaiKham: Optional[datetime] = None
    soNgay: int = 0
    trangThaiKham: str
    ghiChu: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    hoSoThu: Optional[PetSummary] = None

    @classmethod
    def from_model(cls, schedule, include_pet: bool = True) -> "ScheduleResponse":
        pet_summary = None
        if include_pet and schedule.pet is not None:
            pet = schedule.pet
            owner = pet.owner
            pet_summary = PetSummary(
                maHoSo=pet.ma_ho_so,
                tenThu=pet.ten_thu,
                loai=pet.loai,
                trangThai=pet.trang_thai,
                khachHang=OwnerSummary(
                    maKhachHang=owner.ma_khach_hang,
                    tenKhachHang=owner.ten_khach_hang,
                    soDienThoai=owner.so_dien_thoai,
                )
                if owner
                else None,
            )
        return cls(
            id=schedule.id,
            maHoSo=schedule.ma_ho_so,
            ngayKham=schedule.ngay_kham,
            ngayTaiKham=schedule.ngay_tai_kham,
            soNgay=schedule.so_ngay or 0,
            trangThaiKham=schedule.trang_thai_kham,
            ghiChu=schedule.ghi_chu,
            createdAt=schedule.created_at,
            updatedAt=schedule.updated_at,
            hoSoThu=pet_summary,
        )
