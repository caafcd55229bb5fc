"""
Сервис "чистых" серий

Состояния пользователя:
- нет серии
- активная серия (одна строка streak_history с is_current = 1)

Переходы:
- ensure_started: открыть серию длиной 1, если ее нет
- extend: +1 день за прошедший чистый день (не чаще раза в день)
- break_streak: закрыть активную серию при записи ругательства

Все решения принимаются по календарным датам локальной зоны.
"""
import logging
from typing import List, Optional

from database import Database, StreakHistory, NotFoundError
from .local_calendar import LocalCalendar


logger = logging.getLogger(__name__)


class StreakService:
    """
    Машина состояний серии дней без ругательств
    """

    def __init__(self, db: Database, calendar: LocalCalendar = None):
        self.db = db
        self.calendar = calendar or LocalCalendar()

    async def ensure_started(self, user_id: int, day: str = None, conn=None) -> StreakHistory:
        """
        Открывает серию, если активной нет; иначе возвращает текущую

        Args:
            user_id: ID пользователя
            day: календарный день начала (по умолчанию сегодня)
        """
        day = day or self.calendar.today()
        async with self.db.transaction(conn) as db:
            current = await self.db.get_current_streak(user_id, conn=db)
            if current:
                return current

            if not await self.db.get_user(user_id, conn=db):
                raise NotFoundError("User", user_id)

            streak = await self.db.create_streak(
                user_id, self.calendar.now_for_storage(), day, conn=db
            )
            await self.db.set_user_streak_days(user_id, streak.streak_length, conn=db)
            logger.info(f"🌱 Пользователь {user_id}: новая серия с {day}")
            return streak

    async def extend(self, user_id: int, day: str = None, conn=None) -> Optional[StreakHistory]:
        """
        Засчитывает чистый день

        Повторный вызов в тот же день ничего не меняет, как и вызов
        в день, за который уже есть записи.

        Returns:
            Активная серия или None, если день не чистый
        """
        day = day or self.calendar.today()
        async with self.db.transaction(conn) as db:
            if await self.db.has_logs_for_day(user_id, day, conn=db):
                logger.debug(f"Пользователь {user_id}: за {day} есть записи, серия не продлевается")
                return await self.db.get_current_streak(user_id, conn=db)

            current = await self.db.get_current_streak(user_id, conn=db)
            if not current:
                return await self.ensure_started(user_id, day, conn=db)

            if current.last_extended_date and current.last_extended_date >= day:
                return current

            new_length = current.streak_length + 1
            await self.db.extend_streak(current.id, new_length, day, conn=db)
            await self.db.set_user_streak_days(user_id, new_length, conn=db)

            current.streak_length = new_length
            current.last_extended_date = day
            logger.info(f"🔥 Пользователь {user_id}: серия {new_length} дн.")
            return current

    async def break_streak(self, user_id: int, day: str = None, conn=None) -> bool:
        """
        Закрывает активную серию

        Если серии нет (или она уже закрыта сегодня) - ничего не делает.

        Returns:
            True, если серия была закрыта этим вызовом
        """
        async with self.db.transaction(conn) as db:
            current = await self.db.get_current_streak(user_id, conn=db)
            if not current:
                return False

            await self.db.close_streak(current.id, self.calendar.now_for_storage(), conn=db)
            await self.db.set_user_streak_days(user_id, 0, conn=db)
            logger.info(
                f"💥 Пользователь {user_id}: серия {current.streak_length} дн. прервана"
                + (f" ({day})" if day else "")
            )
            return True

    async def get_current_streak(self, user_id: int) -> Optional[StreakHistory]:
        return await self.db.get_current_streak(user_id)

    async def get_current_length(self, user_id: int) -> int:
        current = await self.db.get_current_streak(user_id)
        return current.streak_length if current else 0

    async def has_active_streak(self, user_id: int) -> bool:
        return await self.db.get_current_streak(user_id) is not None

    async def get_longest_streak(self, user_id: int) -> Optional[StreakHistory]:
        """Самая длинная серия, текущая или завершенная"""
        return await self.db.get_longest_streak(user_id)

    async def get_streak_history(self, user_id: int) -> List[StreakHistory]:
        return await self.db.get_streaks(user_id)

    async def get_streaks_longer_than(self, user_id: int, length: int) -> List[StreakHistory]:
        return await self.db.get_streaks(user_id, min_length=length)

    async def get_streaks_in_range(self, user_id: int, start: str, end: str) -> List[StreakHistory]:
        """
        Серии, целиком лежащие в календарных днях [start, end]

        Текущая серия попадает в выборку, если началась не раньше start.
        """
        since, until = self.calendar.day_bounds(start, end)
        return await self.db.get_streaks_in_range(user_id, since, until)
