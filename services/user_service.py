"""
Сервис пользователей: профиль, статистика, настройки
"""
import logging
import re
from typing import Any, Dict, List, Optional

from database import (
    Database, User, UserSettings,
    NotFoundError, UsernameTakenError, ConstraintViolationError,
)
from .local_calendar import LocalCalendar


logger = logging.getLogger(__name__)

REMINDER_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class UserService:
    """
    Управление профилем пользователя и его накопленной статистикой
    """

    def __init__(self, db: Database, calendar: LocalCalendar = None):
        self.db = db
        self.calendar = calendar or LocalCalendar()

    async def create_user(self, username: str, display_name: str = None) -> User:
        """
        Создает пользователя и его настройки по умолчанию

        Raises:
            UsernameTakenError: имя уже занято
        """
        username = (username or "").strip()
        if not username:
            raise ConstraintViolationError("Username must not be empty")

        async with self.db.transaction() as db:
            if await self.db.get_user_by_username(username, conn=db):
                raise UsernameTakenError(username)

            user = await self.db.create_user(
                username, display_name, self.calendar.now_for_storage(), conn=db
            )
            await self.db.create_settings(user.id, conn=db)

        logger.info(f"👤 Создан пользователь {user.username} (id={user.id})")
        return user

    async def get_user(self, user_id: int) -> User:
        user = await self.db.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self.db.get_user_by_username(username)

    async def is_username_taken(self, username: str) -> bool:
        return await self.db.get_user_by_username(username) is not None

    async def get_all_users(self) -> List[User]:
        return await self.db.get_all_users()

    async def update_display_name(self, user_id: int, display_name: Optional[str]) -> User:
        async with self.db.transaction() as db:
            if not await self.db.update_user_display_name(user_id, display_name, conn=db):
                raise NotFoundError("User", user_id)
            return await self.db.get_user(user_id, conn=db)

    async def reset_statistics(self, user_id: int) -> User:
        """
        Обнуляет накопленные total_swears и total_fine

        Журнал, серии и сводки не трогаются; после сброса
        кэшированные итоги считаются "банкой с нуля": уже сделанные
        записи в них больше не входят, в том числе при удалении.
        """
        async with self.db.transaction() as db:
            last_log_id = await self.db.get_last_log_id(user_id, conn=db)
            if not await self.db.set_user_totals(user_id, 0, 0, last_log_id, conn=db):
                raise NotFoundError("User", user_id)
            user = await self.db.get_user(user_id, conn=db)

        logger.info(f"🧹 Статистика пользователя {user_id} сброшена")
        return user

    async def recalculate_totals(self, user_id: int) -> User:
        """Восстанавливает итоги пользователя по всему журналу, отменяя сброс"""
        async with self.db.transaction() as db:
            if not await self.db.get_user(user_id, conn=db):
                raise NotFoundError("User", user_id)
            count, total = await self.db.get_log_totals(user_id, conn=db)
            await self.db.set_user_totals(user_id, count, total, conn=db)
            return await self.db.get_user(user_id, conn=db)

    async def delete_user(self, user_id: int) -> bool:
        """Удаляет пользователя и все его данные"""
        if not await self.db.delete_user(user_id):
            raise NotFoundError("User", user_id)
        logger.info(f"🗑 Пользователь {user_id} удален")
        return True

    # === НАСТРОЙКИ ===

    async def get_settings(self, user_id: int) -> UserSettings:
        settings = await self.db.get_settings(user_id)
        if not settings:
            raise NotFoundError("UserSettings", user_id)
        return settings

    async def update_settings(self, user_id: int, **changes: Any) -> UserSettings:
        """
        Обновляет настройки пользователя

        Args:
            notifications_enabled, dark_mode, share_stats, auto_location: bool
            reminder_time: "HH:MM" или None
        """
        reminder_time = changes.get("reminder_time")
        if reminder_time is not None and (
            not isinstance(reminder_time, str) or not REMINDER_TIME_RE.match(reminder_time)
        ):
            raise ConstraintViolationError(f"Invalid reminder time: {reminder_time!r}")

        async with self.db.transaction() as db:
            if changes and not await self.db.update_settings(user_id, changes, conn=db):
                raise NotFoundError("UserSettings", user_id)
            settings = await self.db.get_settings(user_id, conn=db)
            if not settings:
                raise NotFoundError("UserSettings", user_id)
            return settings

    async def get_statistics(self, user_id: int) -> Dict[str, Any]:
        user = await self.get_user(user_id)
        return {
            "total_swears": user.total_swears,
            "total_fine": user.total_fine,
            "streak_days": user.streak_days,
        }
