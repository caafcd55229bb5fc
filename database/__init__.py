"""
Хранилище SwearJar
"""
from .db import Database
from .entities import (
    User,
    SwearWord,
    Severity,
    UserWord,
    SwearLog,
    Mood,
    UserSettings,
    StreakHistory,
    DailySummary,
    DashboardSnapshot,
)
from .errors import (
    SwearJarError,
    NotFoundError,
    UsernameTakenError,
    ConstraintViolationError,
    StorageFailureError,
)

__all__ = [
    "Database",
    "User",
    "SwearWord",
    "Severity",
    "UserWord",
    "SwearLog",
    "Mood",
    "UserSettings",
    "StreakHistory",
    "DailySummary",
    "DashboardSnapshot",
    "SwearJarError",
    "NotFoundError",
    "UsernameTakenError",
    "ConstraintViolationError",
    "StorageFailureError",
]
