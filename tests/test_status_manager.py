"""Status lookup tables for health status, exam status and animal type"""
import logging

import pytest

from vetclinic.shared import status_manager
from vetclinic.shared.status_manager import (
    ANIMAL,
    EXAM,
    HEALTH,
    UnknownStatusError,
    get_animal_type_config,
    get_exam_status_config,
    get_health_status_config,
    get_statuses_by_group,
    is_valid_animal_type,
    is_valid_exam_status,
    is_valid_health_status,
    status_badge,
)


class TestMembership:
    @pytest.mark.parametrize(
        "code", ["KHOE_MANH", "THEO_DOI", "MANG_THAI", "SAU_SINH", "CACH_LY", "DANG_DIEU_TRI"]
    )
    def test_health_statuses(self, code):
        assert is_valid_health_status(code)

    @pytest.mark.parametrize("code", ["CHUA_KHAM", "DA_KHAM", "HUY", "HOAN", "DANG_KHAM", "CHO_KHAM"])
    def test_exam_statuses(self, code):
        assert is_valid_exam_status(code)

    @pytest.mark.parametrize("code", ["CHO", "MEO", "CHIM", "CA", "THO", "HAMSTER", "KHAC"])
    def test_animal_types(self, code):
        assert is_valid_animal_type(code)

    @pytest.mark.parametrize("code", ["", "khoe_manh", "UNKNOWN", None, 1])
    def test_rejects_unknown_codes(self, code):
        assert not is_valid_health_status(code)
        assert not is_valid_exam_status(code)
        assert not is_valid_animal_type(code)


class TestLookup:
    def test_health_descriptor(self):
        config = get_health_status_config("KHOE_MANH")
        assert config.value == "KHOE_MANH"
        assert config.label == "Khỏe mạnh"
        assert config.emoji
        assert config.known is True

    def test_exam_descriptor(self):
        assert get_exam_status_config("DA_KHAM").label == "Đã khám"

    def test_animal_descriptor(self):
        assert get_animal_type_config("MEO").label == "Mèo"

    def test_unknown_code_raises(self):
        with pytest.raises(UnknownStatusError):
            get_health_status_config("KHONG_CO")
        with pytest.raises(UnknownStatusError):
            get_exam_status_config("KHOE_MANH")

    def test_unknown_status_error_is_a_value_error(self):
        assert issubclass(UnknownStatusError, ValueError)


class TestStatusBadge:
    def test_known_code(self):
        badge = status_badge(EXAM, "HUY")
        assert badge.known is True
        assert badge.label == "Hủy"

    def test_unknown_code_is_flagged_and_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger=status_manager.__name__):
            badge = status_badge(HEALTH, "LA")
        assert badge.known is False
        assert badge.label == "LA"
        assert badge.emoji == "❓"
        assert "LA" in caplog.text

    def test_missing_code(self):
        assert status_badge(ANIMAL, None).known is False


class TestOptionsAndGroups:
    def test_form_exam_options_exclude_workflow_stages(self):
        values = [option.value for option in status_manager.get_exam_status_options()]
        assert values == ["CHUA_KHAM", "DA_KHAM", "HUY", "HOAN"]

    def test_health_options_cover_every_status(self):
        assert len(status_manager.get_health_status_options()) == 6

    def test_groups(self):
        assert get_statuses_by_group(HEALTH, "CRITICAL") == ("CACH_LY", "DANG_DIEU_TRI")
        assert get_statuses_by_group(EXAM, "CANCELLED") == ("HUY", "HOAN")
        assert get_statuses_by_group(EXAM, "MISSING") == ()
