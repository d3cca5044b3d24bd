"""Customer domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_vn_phone


def _blank_to_none(v):
    if v is None:
        return None
    value = str(v).strip()
    return value or None


class CustomerWrite(BaseModel):
    """Schema for creating or replacing a customer"""

    tenKhachHang: str = Field(default="", validate_default=True)
    soDienThoai: str = Field(default="", validate_default=True)
    diaChi: Optional[str] = None
    maXa: Optional[str] = None

    @field_validator("tenKhachHang", mode="before")
    @classmethod
    def validate_name(cls, v):
        value = _blank_to_none(v)
        if value is None:
            raise ValueError("Tên khách hàng là bắt buộc")
        if len(value) < 2:
            raise ValueError("Tên khách hàng phải có ít nhất 2 ký tự")
        if len(value) > 100:
            raise ValueError("Tên khách hàng không được quá 100 ký tự")
        return value

    @field_validator("soDienThoai", mode="before")
    @classmethod
    def validate_phone(cls, v):
        value = _blank_to_none(v)
        if value is None:
            raise ValueError("Số điện thoại là bắt buộc")
        return validate_vn_phone(value)

    @field_validator("diaChi", mode="before")
    @classmethod
    def validate_street(cls, v):
        value = _blank_to_none(v)
        if value is None:
            return None
        if len(value) < 5:
            raise ValueError("Địa chỉ phải có ít nhất 5 ký tự")
        if len(value) > 200:
            raise ValueError("Địa chỉ không được quá 200 ký tự")
        return value

    @field_validator("maXa", mode="before")
    @classmethod
    def validate_ma_xa(cls, v):
        return _blank_to_none(v)


class AddressSummary(BaseModel):
    maXa: str
    tenXa: Optional[str] = None


class PetSummary(BaseModel):
    maHoSo: str
    tenThu: str
    loai: str
    trangThai: str
    ngayTaiKham: Optional[datetime] = None


class CustomerResponse(BaseModel):
    """Schema for customer response"""

    maKhachHang: str
    tenKhachHang: str
    soDienThoai: str
    diaChi: Optional[str] = None
    maXa: Optional[str] = None
    xa: Optional[AddressSummary] = None
    hoSoThu: list[PetSummary] = []
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, customer) -> "CustomerResponse":
        address = customer.address
        return cls(
            maKhachHang=customer.ma_khach_hang,
            tenKhachHang=customer.ten_khach_hang,
            soDienThoai=customer.so_dien_thoai,
            diaChi=customer.dia_chi,
            maXa=customer.ma_xa,
            xa=AddressSummary(maXa=address.ma_xa, tenXa=address.ten_xa) if address else None,
            hoSoThu=[
                PetSummary(
                    maHoSo=p.ma_ho_so,
                    tenThu=p.ten_thu,
                    loai=p.loai,
                    trangThai=p.trang_thai,
                    ngayTaiKham=p.ngay_tai_kham,
                )
                for p in customer.pets
            ],
            createdAt=customer.created_at,
        )
