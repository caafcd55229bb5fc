"""
Сервис журнала ругательств

Запись события - одна транзакция:
1. проверка пользователя и слова
2. расчет штрафа
3. вставка записи
4. обновление накопленной статистики пользователя
5. завершение активной серии
6. пересчет сводки за день события

Если любой шаг падает, откатывается все.
"""
import logging
from datetime import datetime
from typing import List, Optional, Union

from database import (
    Database, SwearLog, Mood, NotFoundError, ConstraintViolationError,
)
from .local_calendar import LocalCalendar
from .fine_service import FineResolver
from .streak_service import StreakService
from .daily_summary_service import DailySummaryService


logger = logging.getLogger(__name__)


def _parse_mood(mood: Union[Mood, str, None]) -> Optional[Mood]:
    if mood is None or isinstance(mood, Mood):
        return mood
    try:
        return Mood(mood)
    except ValueError:
        raise ConstraintViolationError(f"Unknown mood: {mood!r}")


class SwearLogService:
    """
    Запись событий и работа с журналом
    """

    def __init__(
        self,
        db: Database,
        fines: FineResolver,
        streaks: StreakService,
        summaries: DailySummaryService,
        calendar: LocalCalendar = None
    ):
        self.db = db
        self.fines = fines
        self.streaks = streaks
        self.summaries = summaries
        self.calendar = calendar or LocalCalendar()

    async def record_event(
        self,
        user_id: int,
        word_id: int,
        mood: Union[Mood, str, None] = None,
        context: str = None,
        location: str = None,
        timestamp: datetime = None
    ) -> SwearLog:
        """
        Записывает ругательство

        Args:
            user_id: ID пользователя
            word_id: ID слова из словаря
            mood: настроение (angry, frustrated, surprised, amused, stressed, other)
            context: описание ситуации
            location: место
            timestamp: время события (по умолчанию сейчас)

        Returns:
            Сохраненная запись с присвоенным id

        Raises:
            NotFoundError: нет пользователя или слова (или слово выведено из словаря)
        """
        mood = _parse_mood(mood)
        timestamp = self.calendar.to_local(timestamp) if timestamp else self.calendar.now()
        day = self.calendar.day_of(timestamp)

        async with self.db.transaction() as db:
            if not await self.db.get_user(user_id, conn=db):
                raise NotFoundError("User", user_id)

            word = await self.db.get_word(word_id, conn=db)
            if not word or word.is_retired:
                raise NotFoundError("SwearWord", word_id)

            fine_amount = await self.fines.resolve(user_id, word_id, conn=db)

            log = await self.db.insert_log(
                user_id=user_id,
                word_id=word_id,
                timestamp=self.calendar.to_storage(timestamp),
                log_date=day,
                fine_amount=fine_amount,
                mood=mood.value if mood else None,
                context=context,
                location=location,
                conn=db,
            )

            await self.db.add_to_user_totals(
                user_id, 1, fine_amount,
                last_active=self.calendar.now_for_storage(),
                conn=db,
            )
            await self.streaks.break_streak(user_id, day, conn=db)
            await self.summaries.recompute(user_id, day, conn=db)

        logger.info(
            f"🤬 Пользователь {user_id}: '{word.word}' за {fine_amount} ({day})"
        )
        return log

    async def update_worth_it(self, log_id: int, worth_it: Optional[bool]) -> SwearLog:
        """Отмечает, стоило ли оно того"""
        async with self.db.transaction() as db:
            if not await self.db.update_log_worth_it(log_id, worth_it, conn=db):
                raise NotFoundError("SwearLog", log_id)
            return await self.db.get_log(log_id, conn=db)

    async def delete_log(self, log_id: int) -> bool:
        """
        Удаляет запись, уменьшает статистику и пересчитывает сводку дня

        Серия не восстанавливается: прерванная серия остается в истории.
        """
        async with self.db.transaction() as db:
            log = await self.db.get_log(log_id, conn=db)
            if not log:
                raise NotFoundError("SwearLog", log_id)

            user = await self.db.get_user(log.user_id, conn=db)
            await self.db.delete_log(log_id, conn=db)
            # записи до сброса статистики в итогах уже не учтены
            if log.id > user.totals_since_log_id:
                await self.db.add_to_user_totals(log.user_id, -1, -log.fine_amount, conn=db)
            await self.summaries.recompute(log.user_id, log.log_date, conn=db)

        logger.info(f"🗑 Запись {log_id} пользователя {log.user_id} удалена")
        return True

    async def get_log(self, log_id: int) -> SwearLog:
        log = await self.db.get_log(log_id)
        if not log:
            raise NotFoundError("SwearLog", log_id)
        return log

    async def get_recent_logs(self, user_id: int, limit: int = 10) -> List[SwearLog]:
        return await self.db.get_recent_logs(user_id, limit)

    async def get_logs_for_day(self, user_id: int, date: str) -> List[SwearLog]:
        return await self.db.get_logs_for_day(user_id, LocalCalendar.validate_day(date))

    async def get_logs_in_range(self, user_id: int, start: str, end: str) -> List[SwearLog]:
        return await self.db.get_logs_in_range(
            user_id, LocalCalendar.validate_day(start), LocalCalendar.validate_day(end)
        )

    async def get_logs_by_mood(self, user_id: int, mood: Union[Mood, str]) -> List[SwearLog]:
        """Записи с указанным настроением, новые первыми"""
        parsed = _parse_mood(mood)
        if parsed is None:
            raise ConstraintViolationError("Mood is required")
        return await self.db.get_logs_by_mood(user_id, parsed.value)

    async def get_logs_by_word(self, user_id: int, word_id: int) -> List[SwearLog]:
        """Записи по слову, включая выведенные из словаря слова"""
        return await self.db.get_logs_by_word(user_id, word_id)
