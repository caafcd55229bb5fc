"""
Дневные сводки

Сводка за день - чистая функция от записей журнала за этот
календарный день, поэтому пересчет можно запускать сколько угодно раз.
"""
import logging
from collections import Counter
from decimal import Decimal
from typing import Iterable, List, Optional

from database import Database, DailySummary, SwearLog, NotFoundError
from .local_calendar import LocalCalendar


logger = logging.getLogger(__name__)


def aggregate_logs(user_id: int, date: str, logs: Iterable[SwearLog]) -> DailySummary:
    """
    Считает сводку по записям одного дня

    Ничья по слову или настроению решается в пользу того,
    что встретилось раньше (записи идут по времени).
    """
    logs = sorted(logs, key=lambda log: (log.timestamp, log.id))

    total_fine = sum((log.fine_amount for log in logs), Decimal("0"))
    words = Counter(log.word_id for log in logs)
    moods = Counter(log.mood for log in logs if log.mood is not None)

    return DailySummary(
        user_id=user_id,
        date=date,
        swear_count=len(logs),
        total_fine=total_fine,
        most_common_word_id=words.most_common(1)[0][0] if words else None,
        most_common_mood=moods.most_common(1)[0][0] if moods else None,
        is_clean_day=len(logs) == 0,
    )


class DailySummaryService:
    """
    Пересчет и выборка дневных сводок
    """

    def __init__(self, db: Database, calendar: LocalCalendar = None):
        self.db = db
        self.calendar = calendar or LocalCalendar()

    async def recompute(self, user_id: int, date: str, conn=None) -> DailySummary:
        """
        Пересчитывает сводку за день и сохраняет ее (insert или update)

        Args:
            user_id: ID пользователя
            date: календарный день YYYY-MM-DD
        """
        LocalCalendar.validate_day(date)
        async with self.db.transaction(conn) as db:
            if not await self.db.get_user(user_id, conn=db):
                raise NotFoundError("User", user_id)

            logs = await self.db.get_logs_for_day(user_id, date, conn=db)
            summary = aggregate_logs(user_id, date, logs)
            saved = await self.db.upsert_summary(summary, conn=db)
            logger.debug(
                f"📊 Сводка {user_id}/{date}: {saved.swear_count} шт., {saved.total_fine}"
            )
            return saved

    async def ensure_today(self, user_id: int, conn=None) -> DailySummary:
        """Возвращает сводку за сегодня, создавая ее при отсутствии"""
        today = self.calendar.today()
        async with self.db.transaction(conn) as db:
            existing = await self.db.get_summary(user_id, today, conn=db)
            if existing:
                return existing
            return await self.recompute(user_id, today, conn=db)

    async def get_summary(self, user_id: int, date: str) -> Optional[DailySummary]:
        return await self.db.get_summary(user_id, LocalCalendar.validate_day(date))

    async def get_all(self, user_id: int) -> List[DailySummary]:
        return await self.db.get_summaries(user_id)

    async def get_stats_for_range(self, user_id: int, start: str, end: str) -> List[DailySummary]:
        """Сводки за период [start, end], новые первыми"""
        LocalCalendar.validate_day(start)
        LocalCalendar.validate_day(end)
        if start > end:
            start, end = end, start
        return await self.db.get_summaries_in_range(user_id, start, end)

    async def get_clean_days(self, user_id: int) -> List[DailySummary]:
        return await self.db.get_clean_days(user_id)

    async def get_clean_day_count(self, user_id: int) -> int:
        return await self.db.get_clean_day_count(user_id)

    async def get_total_fine(self, user_id: int, days: int = None) -> Decimal:
        """
        Сумма штрафов по сводкам

        Args:
            days: окно в календарных днях до сегодняшнего (None - за все время)
        """
        since = self.calendar.days_ago(days) if days is not None else None
        return await self.db.get_total_fine(user_id, since)

    async def get_most_common_word(self, user_id: int, days: int = None) -> Optional[int]:
        since = self.calendar.days_ago(days) if days is not None else None
        return await self.db.get_most_common_word(user_id, since)
