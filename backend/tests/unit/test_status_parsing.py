import pytest

from practice_planner.core.exceptions import ValidationError
from practice_planner.domain.entities import AttendanceStatus, PracticeStatus
from practice_planner.services.attendance_ledger import parse_attendance_status
from practice_planner.services.practice_scheduler import parse_status


class TestPracticeStatusParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Draft", PracticeStatus.DRAFT),
            ("Ready", PracticeStatus.READY),
            ("ready", PracticeStatus.READY),
            (PracticeStatus.DRAFT, PracticeStatus.DRAFT),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_status(value) is expected

    @pytest.mark.parametrize("value", ["Archived", "", 1, None])
    def test_invalid_values(self, value):
        with pytest.raises(ValidationError):
            parse_status(value)


class TestAttendanceStatusParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (0, AttendanceStatus.UNKNOWN),
            (1, AttendanceStatus.NO),
            (2, AttendanceStatus.YES),
            ("Yes", AttendanceStatus.YES),
            ("no", AttendanceStatus.NO),
            ("UNKNOWN", AttendanceStatus.UNKNOWN),
            (AttendanceStatus.YES, AttendanceStatus.YES),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_attendance_status(value) is expected

    @pytest.mark.parametrize("value", [3, -1, True, "Maybe", None, 1.0])
    def test_invalid_values(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_attendance_status(value)
        assert exc_info.value.field == "status"
