"""
Tests for local calendar-day handling
"""
import pytest
from datetime import datetime

import pytz

from database import ConstraintViolationError
from services import LocalCalendar
from conftest import FakeClock, TIMEZONE


class TestDayOf:
    """Instants map to the local calendar date, not the UTC date"""

    def test_after_local_midnight_is_next_day(self):
        calendar = LocalCalendar(TIMEZONE)
        # 22:30 UTC = 00:30 по Киеву следующего дня
        assert calendar.day_of(datetime(2024, 3, 10, 22, 30, tzinfo=pytz.utc)) == "2024-03-11"

    def test_before_local_midnight_is_same_day(self):
        calendar = LocalCalendar(TIMEZONE)
        assert calendar.day_of(datetime(2024, 3, 10, 21, 59, tzinfo=pytz.utc)) == "2024-03-10"

    def test_dst_transition_night(self):
        """Night of the spring-forward switch stays one calendar day"""
        calendar = LocalCalendar(TIMEZONE)
        before_switch = datetime(2024, 3, 30, 22, 30, tzinfo=pytz.utc)  # 00:30 EET
        after_switch = datetime(2024, 3, 31, 1, 30, tzinfo=pytz.utc)    # 04:30 EEST
        assert calendar.day_of(before_switch) == "2024-03-31"
        assert calendar.day_of(after_switch) == "2024-03-31"

    def test_naive_datetime_is_local_wall_time(self):
        calendar = LocalCalendar(TIMEZONE)
        assert calendar.day_of(datetime(2024, 3, 10, 23, 30)) == "2024-03-10"


class TestToday:

    def test_today_uses_clock(self):
        clock = FakeClock(datetime(2024, 3, 10, 22, 30, tzinfo=pytz.utc))
        calendar = LocalCalendar(TIMEZONE, clock=clock)
        assert calendar.today() == "2024-03-11"

    def test_days_ago_is_calendar_arithmetic_across_dst(self):
        clock = FakeClock(datetime(2024, 4, 1, 10, 0, tzinfo=pytz.utc))
        calendar = LocalCalendar(TIMEZONE, clock=clock)
        assert calendar.days_ago(0) == "2024-04-01"
        assert calendar.days_ago(1) == "2024-03-31"
        assert calendar.days_ago(2) == "2024-03-30"

    def test_to_storage_is_utc_iso(self):
        calendar = LocalCalendar(TIMEZONE)
        stored = calendar.to_storage(datetime(2024, 3, 10, 12, 0))
        assert stored == "2024-03-10T10:00:00+00:00"
        assert datetime.fromisoformat(stored).utcoffset().total_seconds() == 0

    def test_from_storage_is_local(self):
        calendar = LocalCalendar(TIMEZONE)
        restored = calendar.from_storage("2024-03-10T22:30:00+00:00")
        assert (restored.hour, restored.minute) == (0, 30)
        assert calendar.day_of(restored) == "2024-03-11"


class TestValidateDay:

    def test_accepts_iso_day(self):
        assert LocalCalendar.validate_day("2024-03-10") == "2024-03-10"

    @pytest.mark.parametrize("value", ["2024-3-10", "10.03.2024", "", None, "2024-02-30"])
    def test_rejects_other_forms(self, value):
        with pytest.raises(ConstraintViolationError):
            LocalCalendar.validate_day(value)

    def test_day_bounds_use_local_midnight(self):
        calendar = LocalCalendar(TIMEZONE)
        # 31 марта переход на летнее время: UTC+2 -> UTC+3
        assert calendar.day_bounds("2024-03-30", "2024-03-31") == (
            "2024-03-29T22:00:00+00:00",
            "2024-03-31T21:00:00+00:00",
        )

    def test_day_bounds_validate_days(self):
        with pytest.raises(ConstraintViolationError):
            LocalCalendar(TIMEZONE).day_bounds("2024-3-1", "2024-03-02")
