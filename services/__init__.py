"""
Сервисы SwearJar
"""
from .local_calendar import LocalCalendar
from .fine_service import FineResolver
from .streak_service import StreakService
from .daily_summary_service import DailySummaryService, aggregate_logs
from .swear_log_service import SwearLogService
from .swear_word_service import SwearWordService
from .user_service import UserService
from .dashboard_service import DashboardService

__all__ = [
    "LocalCalendar",
    "FineResolver",
    "StreakService",
    "DailySummaryService",
    "aggregate_logs",
    "SwearLogService",
    "SwearWordService",
    "UserService",
    "DashboardService",
]
