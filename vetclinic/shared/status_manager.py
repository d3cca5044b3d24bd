"""
Centralized status management.

Maps the closed sets of health-status, exam-status and animal-type codes to
display descriptors. Lookups of unknown codes raise ``UnknownStatusError``;
callers that only need something to render use ``status_badge`` which returns
an explicit unknown descriptor instead.
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

HEALTH = "health"
EXAM = "exam"
ANIMAL = "animal"


class UnknownStatusError(ValueError):
    def __init__(self, kind: str, code: object):
        super().__init__(f"Unknown {kind} code: {code!r}")
        self.kind = kind
        self.code = code


@dataclass(frozen=True)
class StatusConfig:
    value: str
    label: str
    emoji: str
    class_name: str = ""
    dot_class: Optional[str] = None
    known: bool = True


HEALTH_STATUS_CONFIGS: dict[str, StatusConfig] = {
    "KHOE_MANH": StatusConfig(
        "KHOE_MANH", "Khỏe mạnh", "💚", "bg-green-100 text-green-800 border-green-200", "bg-green-500"
    ),
    "THEO_DOI": StatusConfig(
        "THEO_DOI", "Theo dõi", "⚠️", "bg-yellow-100 text-yellow-800 border-yellow-200", "bg-yellow-500"
    ),
    "MANG_THAI": StatusConfig(
        "MANG_THAI", "Mang thai", "🤰", "bg-purple-100 text-purple-800 border-purple-200", "bg-purple-500"
    ),
    "SAU_SINH": StatusConfig(
        "SAU_SINH", "Sau sinh", "👶", "bg-blue-100 text-blue-800 border-blue-200", "bg-blue-500"
    ),
    "CACH_LY": StatusConfig(
        "CACH_LY", "Cách ly", "🚨", "bg-orange-100 text-orange-800 border-orange-200", "bg-orange-500"
    ),
    "DANG_DIEU_TRI": StatusConfig(
        "DANG_DIEU_TRI", "Đang điều trị", "🏥", "bg-red-100 text-red-800 border-red-200", "bg-red-500"
    ),
}

EXAM_STATUS_CONFIGS: dict[str, StatusConfig] = {
    "CHUA_KHAM": StatusConfig(
        "CHUA_KHAM", "Chưa khám", "⏳", "bg-yellow-100 text-yellow-800 border-yellow-200", "bg-yellow-500"
    ),
    "DA_KHAM": StatusConfig(
        "DA_KHAM", "Đã khám", "✅", "bg-green-100 text-green-800 border-green-200", "bg-green-500"
    ),
    "HUY": StatusConfig("HUY", "Hủy", "❌", "bg-red-100 text-red-800 border-red-200", "bg-red-500"),
    "HOAN": StatusConfig(
        "HOAN", "Hoãn", "⏸️", "bg-orange-100 text-orange-800 border-orange-200", "bg-orange-500"
    ),
    # Appointment-management stages
    "DANG_KHAM": StatusConfig(
        "DANG_KHAM", "Đang khám", "🔵", "bg-blue-100 text-blue-800 border-blue-200", "bg-blue-500"
    ),
    "CHO_KHAM": StatusConfig(
        "CHO_KHAM", "Chờ khám", "🟡", "bg-yellow-100 text-yellow-800 border-yellow-200", "bg-yellow-500"
    ),
}

ANIMAL_TYPE_CONFIGS: dict[str, StatusConfig] = {
    "CHO": StatusConfig("CHO", "Chó", "🐕"),
    "MEO": StatusConfig("MEO", "Mèo", "🐱"),
    "CHIM": StatusConfig("CHIM", "Chim", "🐦"),
    "CA": StatusConfig("CA", "Cá", "🐠"),
    "THO": StatusConfig("THO", "Thỏ", "🐰"),
    "HAMSTER": StatusConfig("HAMSTER", "Hamster", "🐹"),
    "KHAC": StatusConfig("KHAC", "Khác", "🐾"),
}

_CONFIGS = {
    HEALTH: HEALTH_STATUS_CONFIGS,
    EXAM: EXAM_STATUS_CONFIGS,
    ANIMAL: ANIMAL_TYPE_CONFIGS,
}

# Statuses offered in forms; DANG_KHAM / CHO_KHAM are set by the appointment flow
FORM_EXAM_STATUSES = ("CHUA_KHAM", "DA_KHAM", "HUY", "HOAN")

STATUS_GROUPS = {
    HEALTH: {
        "HEALTHY": ("KHOE_MANH",),
        "MONITORING": ("THEO_DOI", "MANG_THAI", "SAU_SINH"),
        "CRITICAL": ("CACH_LY", "DANG_DIEU_TRI"),
    },
    EXAM: {
        "PENDING": ("CHUA_KHAM", "CHO_KHAM"),
        "IN_PROGRESS": ("DANG_KHAM",),
        "COMPLETED": ("DA_KHAM",),
        "CANCELLED": ("HUY", "HOAN"),
    },
}


def is_valid_health_status(code: object) -> bool:
    return isinstance(code, str) and code in HEALTH_STATUS_CONFIGS


def is_valid_exam_status(code: object) -> bool:
    return isinstance(code, str) and code in EXAM_STATUS_CONFIGS


def is_valid_animal_type(code: object) -> bool:
    return isinstance(code, str) and code in ANIMAL_TYPE_CONFIGS


def get_config(kind: str, code: object) -> StatusConfig:
    try:
        configs = _CONFIGS[kind]
    except KeyError:
        raise ValueError(f"Unknown status kind: {kind!r}") from None
    if not isinstance(code, str) or code not in configs:
        raise UnknownStatusError(kind, code)
    return configs[code]


def get_health_status_config(code: object) -> StatusConfig:
    return get_config(HEALTH, code)


def get_exam_status_config(code: object) -> StatusConfig:
    return get_config(EXAM, code)


def get_animal_type_config(code: object) -> StatusConfig:
    return get_config(ANIMAL, code)


def status_badge(kind: str, code: object) -> StatusConfig:
    """Descriptor for rendering; unknown codes are logged and flagged with ``known=False``"""
    try:
        return get_config(kind, code)
    except UnknownStatusError:
        logger.warning(f"⚠️ Rendering unknown {kind} code: {code!r}")
        text = "" if code is None else str(code)
        return StatusConfig(
            value=text,
            label=text or "?",
            emoji="❓",
            class_name="bg-gray-100 text-gray-800 border-gray-200",
            dot_class="bg-gray-500",
            known=False,
        )


def get_health_status_options() -> list[StatusConfig]:
    return list(HEALTH_STATUS_CONFIGS.values())


def get_exam_status_options() -> list[StatusConfig]:
    return [EXAM_STATUS_CONFIGS[code] for code in FORM_EXAM_STATUSES]


def get_animal_type_options() -> list[StatusConfig]:
    return list(ANIMAL_TYPE_CONFIGS.values())


def get_statuses_by_group(kind: str, group: str) -> tuple[str, ...]:
    return STATUS_GROUPS.get(kind, {}).get(group, ())
