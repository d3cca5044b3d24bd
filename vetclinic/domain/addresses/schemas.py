"""Address domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AddressWrite(BaseModel):
    """Schema for creating or replacing an address"""

    tenXa: str = Field(default="", validate_default=True)

    @field_validator("tenXa", mode="before")
    @classmethod
    def validate_ten_xa(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("Tên xã là bắt buộc")
        value = str(v).strip()
        if len(value) > 255:
            raise ValueError("Tên xã không được quá 255 ký tự")
        return value


class AddressResponse(BaseModel):
    """Schema for address response"""

    maXa: str
    tenXa: str
    customerCount: int = 0
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, address, customer_count: int = 0) -> "AddressResponse":
        return cls(
            maXa=address.ma_xa,
            tenXa=address.ten_xa,
            customerCount=customer_count,
            createdAt=address.created_at,
        )
