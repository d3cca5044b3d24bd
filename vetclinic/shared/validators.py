"""Shared validation utilities"""

import re
from typing import Optional

from ..errors import BadRequestError
from .status_manager import (
    is_valid_animal_type,
    is_valid_exam_status,
    is_valid_health_status,
)

# Vietnamese mobile numbers: +84 / 84 / 0 followed by a 3,5,7,8,9 prefix and 8 digits
VN_PHONE_PATTERN = re.compile(r"^(\+84|84|0)(3|5|7|8|9)[0-9]{8}$")


def validate_vn_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a Vietnamese mobile phone number.

    Args:
        phone: Phone number string; spaces, dots and dashes are ignored

    Returns:
        The number with separators removed

    Raises:
        ValueError: If the number is not a valid Vietnamese mobile number
    """
    if not phone:
        return phone

    normalized = re.sub(r"[\s.\-]", "", phone)
    if not VN_PHONE_PATTERN.match(normalized):
        raise ValueError("Số điện thoại không hợp lệ")
    return normalized


def validate_health_status(value: str) -> str:
    if not is_valid_health_status(value):
        raise ValueError("Trạng thái sức khỏe không hợp lệ")
    return value


def validate_exam_status(value: str) -> str:
    if not is_valid_exam_status(value):
        raise ValueError("Trạng thái khám không hợp lệ")
    return value


def validate_animal_type(value: str) -> str:
    if not is_valid_animal_type(value):
        raise ValueError("Loại thú cưng không hợp lệ")
    return value


def parse_schedule_id(raw: str) -> int:
    """Path ids arrive as text so a non-numeric id can be answered with 400 rather than 422"""
    try:
        schedule_id = int(raw)
    except (TypeError, ValueError):
        raise BadRequestError("ID lịch khám không hợp lệ") from None
    if schedule_id < 1:
        raise BadRequestError("ID lịch khám không hợp lệ")
    return schedule_id


def optional_filter(value: Optional[str], validator, message: str) -> Optional[str]:
    """Validate an optional query-string enum filter; empty means no filter"""
    if not value:
        return None
    try:
        return validator(value)
    except ValueError:
        raise BadRequestError(message) from None
