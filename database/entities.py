"""
Сущности SwearJar и преобразование строк SQLite
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class Severity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @property
    def suggested_fine(self) -> Decimal:
        """Штраф по умолчанию для уровня грубости"""
        return SUGGESTED_FINES[self]


SUGGESTED_FINES = {
    Severity.MILD: Decimal("0.25"),
    Severity.MODERATE: Decimal("0.50"),
    Severity.SEVERE: Decimal("1.00"),
}


class Mood(str, Enum):
    ANGRY = "angry"
    FRUSTRATED = "frustrated"
    SURPRISED = "surprised"
    AMUSED = "amused"
    STRESSED = "stressed"
    OTHER = "other"


def to_decimal(value) -> Decimal:
    """Приводит значение из БД или от пользователя к Decimal"""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # float через str, чтобы 0.1 не превращалось в 0.1000000000000000055
    return Decimal(str(value))


def _parse_instant(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _optional_bool(value) -> Optional[bool]:
    return None if value is None else bool(value)


@dataclass
class User:
    id: int
    username: str
    display_name: Optional[str]
    created_at: datetime
    last_active: datetime
    streak_days: int = 0
    total_swears: int = 0
    total_fine: Decimal = Decimal("0")
    # записи с id не больше этого не входят в total_swears / total_fine
    totals_since_log_id: int = 0

    @classmethod
    def from_row(cls, row) -> "User":
        return cls(
            id=row["id"],
            username=row["username"],
            display_name=row["display_name"],
            created_at=_parse_instant(row["created_at"]),
            last_active=_parse_instant(row["last_active"]),
            streak_days=row["streak_days"],
            total_swears=row["total_swears"],
            total_fine=to_decimal(row["total_fine"]),
            totals_since_log_id=row["totals_since_log_id"],
        )


@dataclass
class SwearWord:
    id: int
    word: str
    severity: Severity
    default_fine: Decimal
    is_custom: bool = False
    is_retired: bool = False

    @classmethod
    def from_row(cls, row) -> "SwearWord":
        return cls(
            id=row["id"],
            word=row["word"],
            severity=Severity(row["severity"]),
            default_fine=to_decimal(row["default_fine"]),
            is_custom=bool(row["is_custom"]),
            is_retired=bool(row["is_retired"]),
        )


@dataclass
class UserWord:
    id: int
    user_id: int
    word_id: int
    custom_fine: Optional[Decimal]
    is_active: bool = True

    @classmethod
    def from_row(cls, row) -> "UserWord":
        custom_fine = row["custom_fine"]
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            word_id=row["word_id"],
            custom_fine=None if custom_fine is None else to_decimal(custom_fine),
            is_active=bool(row["is_active"]),
        )


@dataclass
class SwearLog:
    id: int
    user_id: int
    word_id: int
    timestamp: datetime
    log_date: str
    fine_amount: Decimal
    mood: Optional[Mood] = None
    worth_it: Optional[bool] = None
    context: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "SwearLog":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            word_id=row["word_id"],
            timestamp=_parse_instant(row["timestamp"]),
            log_date=row["log_date"],
            fine_amount=to_decimal(row["fine_amount"]),
            mood=Mood(row["mood"]) if row["mood"] else None,
            worth_it=_optional_bool(row["worth_it"]),
            context=row["context"],
            location=row["location"],
        )


@dataclass
class UserSettings:
    user_id: int
    notifications_enabled: bool = True
    dark_mode: bool = True
    reminder_time: Optional[str] = None
    share_stats: bool = False
    auto_location: bool = False

    @classmethod
    def from_row(cls, row) -> "UserSettings":
        return cls(
            user_id=row["user_id"],
            notifications_enabled=bool(row["notifications_enabled"]),
            dark_mode=bool(row["dark_mode"]),
            reminder_time=row["reminder_time"],
            share_stats=bool(row["share_stats"]),
            auto_location=bool(row["auto_location"]),
        )


@dataclass
class StreakHistory:
    id: int
    user_id: int
    streak_length: int
    start_date: datetime
    end_date: Optional[datetime] = None
    is_current: bool = True
    last_extended_date: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "StreakHistory":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            streak_length=row["streak_length"],
            start_date=_parse_instant(row["start_date"]),
            end_date=_parse_instant(row["end_date"]),
            is_current=bool(row["is_current"]),
            last_extended_date=row["last_extended_date"],
        )


@dataclass
class DailySummary:
    user_id: int
    date: str
    swear_count: int = 0
    total_fine: Decimal = Decimal("0")
    most_common_word_id: Optional[int] = None
    most_common_mood: Optional[Mood] = None
    is_clean_day: bool = True
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row) -> "DailySummary":
        mood = row["most_common_mood"]
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            date=row["date"],
            swear_count=row["swear_count"],
            total_fine=to_decimal(row["total_fine"]),
            most_common_word_id=row["most_common_word_id"],
            most_common_mood=Mood(mood) if mood else None,
            is_clean_day=bool(row["is_clean_day"]),
        )

    def same_values(self, other: "DailySummary") -> bool:
        """Сравнение без учета id строки"""
        return (
            self.user_id == other.user_id
            and self.date == other.date
            and self.swear_count == other.swear_count
            and self.total_fine == other.total_fine
            and self.most_common_word_id == other.most_common_word_id
            and self.most_common_mood == other.most_common_mood
            and self.is_clean_day == other.is_clean_day
        )


@dataclass
class DashboardSnapshot:
    """Данные для главного экрана"""
    user: User
    current_streak: Optional[StreakHistory]
    longest_streak: Optional[StreakHistory]
    today_summary: DailySummary
    recent_logs: List[SwearLog] = field(default_factory=list)

    @property
    def current_streak_days(self) -> int:
        return self.current_streak.streak_length if self.current_streak else 0
