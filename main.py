"""
Точка входа SwearJar

Собирает сервисы вокруг одного хранилища и выполняет ежедневное
обслуживание: сводка за сегодня и продление чистых серий.
"""
import asyncio
import logging
import sys
from typing import Dict

# Фикс кодировки для Windows
if sys.platform == "win32":
    try:
        import codecs
        sys.stdout = codecs.getwriter("utf-8")(sys.stdout.detach())
        sys.stderr = codecs.getwriter("utf-8")(sys.stderr.detach())
    except (AttributeError, OSError):
        pass

import config
from database import Database, SwearJarError
from services import (
    LocalCalendar,
    FineResolver,
    StreakService,
    DailySummaryService,
    SwearLogService,
    SwearWordService,
    UserService,
    DashboardService,
)

# Настройка логирования
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, config.LOG_LEVEL, logging.INFO)
)
logger = logging.getLogger(__name__)


class SwearJarApp:
    """Главный класс приложения"""

    def __init__(self, db: Database = None, calendar: LocalCalendar = None):
        self.db = db or Database(config.DATABASE_PATH)
        self.calendar = calendar or LocalCalendar(config.TIMEZONE)

        self.fines = FineResolver(self.db)
        self.streaks = StreakService(self.db, self.calendar)
        self.summaries = DailySummaryService(self.db, self.calendar)
        self.logs = SwearLogService(
            db=self.db,
            fines=self.fines,
            streaks=self.streaks,
            summaries=self.summaries,
            calendar=self.calendar
        )
        self.words = SwearWordService(self.db, self.summaries)
        self.users = UserService(self.db, self.calendar)
        self.dashboard = DashboardService(self.db, self.summaries)

    async def initialize(self):
        """Инициализация БД и стандартного словаря"""
        logger.info("🚀 Инициализация SwearJar...")
        await self.db.init_db()
        await self.words.seed_default_words()
        logger.info("✅ База данных инициализирована")

    async def run_daily_check(self) -> Dict[str, int]:
        """
        Ежедневное обслуживание всех пользователей

        Безопасно вызывать несколько раз за день: сводка создается
        только при отсутствии, серия продлевается не чаще раза в день.
        """
        today = self.calendar.today()
        checked = 0
        failed = 0

        for user in await self.users.get_all_users():
            try:
                async with self.db.transaction() as conn:
                    await self.summaries.ensure_today(user.id, conn=conn)
                    await self.streaks.extend(user.id, today, conn=conn)
                checked += 1
            except SwearJarError as e:
                # Сводка пересчитается при следующем чтении
                failed += 1
                logger.error(f"❌ Ошибка обслуживания пользователя {user.id}: {e}")

        logger.info(f"📅 Обслуживание за {today}: {checked} ок, {failed} с ошибками")
        return {"checked": checked, "failed": failed}

    async def run(self):
        config.validate_config()
        await self.initialize()
        await self.run_daily_check()


def main():
    """Запуск ежедневного обслуживания"""
    try:
        asyncio.run(SwearJarApp().run())
    except KeyboardInterrupt:
        logger.info("⚠️ Получен сигнал остановки")
    except Exception as e:
        logger.error(f"❌ Критическая ошибка: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
