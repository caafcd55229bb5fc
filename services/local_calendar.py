"""
Календарные дни в локальной временной зоне устройства

Серии и "чистые" дни считаются по календарным датам YYYY-MM-DD,
а не по скользящим 24-часовым окнам, чтобы переходы на летнее время
не ломали подсчет.
"""
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple
import pytz

import config
from database.errors import ConstraintViolationError


DAY_FORMAT = "%Y-%m-%d"


class LocalCalendar:
    """
    Источник "сейчас" и "сегодня" для всех сервисов

    clock - функция без аргументов, возвращающая aware datetime;
    в тестах подменяется, чтобы управлять сменой дней.
    """

    def __init__(self, timezone: str = None, clock: Optional[Callable[[], datetime]] = None):
        self.tz = pytz.timezone(timezone or config.TIMEZONE)
        self._clock = clock

    def now(self) -> datetime:
        """Текущий момент в локальной зоне"""
        if self._clock is None:
            return datetime.now(self.tz)
        return self.to_local(self._clock())

    def to_local(self, ts: datetime) -> datetime:
        # naive время считаем локальным "настенным" временем
        if ts.tzinfo is None:
            return self.tz.localize(ts)
        return ts.astimezone(self.tz)

    def day_of(self, ts: datetime) -> str:
        """Календарная дата момента ts в локальной зоне"""
        return self.to_local(ts).strftime(DAY_FORMAT)

    def today(self) -> str:
        return self.day_of(self.now())

    def days_ago(self, days: int) -> str:
        """Дата на days календарных дней раньше сегодняшней"""
        today = self.now().date()
        return (today - timedelta(days=days)).strftime(DAY_FORMAT)

    def to_storage(self, ts: datetime) -> str:
        """ISO-8601 момент в UTC для хранения в БД"""
        return self.to_local(ts).astimezone(pytz.utc).isoformat()

    def now_for_storage(self) -> str:
        return self.to_storage(self.now())

    def day_bounds(self, start: str, end: str) -> Tuple[str, str]:
        """
        Полуинтервал [начало start, начало дня после end) в формате хранения

        Полночь берется по локальной зоне, поэтому граница учитывает
        переход на летнее время.
        """
        first = datetime.strptime(self.validate_day(start), DAY_FORMAT)
        after_last = datetime.strptime(self.validate_day(end), DAY_FORMAT) + timedelta(days=1)
        return self.to_storage(first), self.to_storage(after_last)

    def from_storage(self, value: str) -> datetime:
        """Момент из БД в локальной зоне"""
        return self.to_local(datetime.fromisoformat(value))

    @staticmethod
    def validate_day(day: str) -> str:
        """Проверяет формат YYYY-MM-DD и возвращает строку без изменений"""
        try:
            parsed = datetime.strptime(day, DAY_FORMAT)
        except (TypeError, ValueError):
            raise ConstraintViolationError(f"Invalid calendar day: {day!r}")
        # strptime принимает "2024-1-5", а лексикографическое сравнение - нет
        if parsed.strftime(DAY_FORMAT) != day:
            raise ConstraintViolationError(f"Invalid calendar day: {day!r}")
        return day
