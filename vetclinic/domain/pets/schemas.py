"""Pet domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_animal_type, validate_health_status
from ..schedules.schemas import ScheduleWrite


class PetWrite(BaseModel):
    """Editable pet fields, shared by create and replace"""

    tenThu: str = Field(default="", validate_default=True)
    loai: str = Field(default="", validate_default=True)
    trangThai: str = Field(default="KHOE_MANH", validate_default=True)

    @field_validator("tenThu", mode="before")
    @classmethod
    def validate_name(cls, v):
        value = str(v).strip() if v is not None else ""
        if not value:
            raise ValueError("Tên thú cưng không được để trống")
        if len(value) > 100:
            raise ValueError("Tên thú cưng không được quá 100 ký tự")
        return value

    @field_validator("loai", mode="before")
    @classmethod
    def validate_species(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("Loại thú cưng không được để trống")
        return validate_animal_type(str(v).strip())

    @field_validator("trangThai", mode="before")
    @classmethod
    def validate_status(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("Trạng thái không được để trống")
        return validate_health_status(str(v).strip())


class PetCreate(PetWrite):
    """Create body: owner plus an optional first schedule"""

    maKhachHang: str = Field(default="", validate_default=True)
    lichTheoDoi: Optional[ScheduleWrite] = None

    @field_validator("maKhachHang", mode="before")
    @classmethod
    def validate_owner(cls, v):
        value = str(v).strip() if v is not None else ""
        if not value:
            raise ValueError("Mã khách hàng là bắt buộc")
        return value


class OwnerSummary(BaseModel):
    maKhachHang: str
    tenKhachHang: str
    soDienThoai: str
    diaChi: Optional[str] = None


class ScheduleSummary(BaseModel):
    id: int
    ngayKham: datetime
    ngayTaiKham: Optional[datetime] = None
    soNgay: int = 0
    trangThaiKham: str
    ghiChu: Optional[str] = None


class PetResponse(BaseModel):
    """Schema for pet response"""

    maHoSo: str
    tenThu: str
    loai: str
    trangThai: str
    maKhachHang: str
    ngayKhamGanNhat: Optional[datetime] = None
    ngayTaiKham: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    khachHang: Optional[OwnerSummary] = None
    lichTheoDoi: list[ScheduleSummary] = []

    @classmethod
    def from_model(cls, pet, schedule_limit: Optional[int] = None) -> "PetResponse":
        """``schedule_limit`` keeps only the N most recent schedules (list views use 1)"""
        owner = pet.owner
        schedules = pet.schedules if schedule_limit is None else pet.schedules[:schedule_limit]
        return cls(
            maHoSo=pet.ma_ho_so,
            tenThu=pet.ten_thu,
            loai=pet.loai,
            trangThai=pet.trang_thai,
            maKhachHang=pet.ma_khach_hang,
            ngayKhamGanNhat=pet.ngay_kham_gan_nhat,
            ngayTaiKham=pet.ngay_tai_kham,
            createdAt=pet.created_at,
            khachHang=OwnerSummary(
                maKhachHang=owner.ma_khach_hang,
                tenKhachHang=owner.ten_khach_hang,
                soDienThoai=owner.so_dien_thoai,
                diaChi=owner.dia_chi,
            )
            if owner
            else None,
            lichTheoDoi=[
                ScheduleSummary(
                    id=s.id,
                    ngayKham=s.ngay_kham,
                    ngayTaiKham=s.ngay_tai_kham,
                    soNgay=s.so_ngay or 0,
                    trangThaiKham=s.trang_thai_kham,
                    ghiChu=s.ghi_chu,
                )
                for s in schedules
            ],
        )
