"""
Снимок данных для главного экрана
"""
from database import Database, DashboardSnapshot, NotFoundError
from .daily_summary_service import DailySummaryService

import config


class DashboardService:

    def __init__(self, db: Database, summaries: DailySummaryService,
                 recent_limit: int = None):
        self.db = db
        self.summaries = summaries
        self.recent_limit = recent_limit or config.RECENT_LOGS_LIMIT

    async def get_dashboard_snapshot(self, user_id: int, limit: int = None) -> DashboardSnapshot:
        """
        Итоги пользователя, текущая и лучшая серии, сводка за сегодня
        и последние записи - все из одной транзакции
        """
        limit = limit or self.recent_limit
        async with self.db.transaction() as db:
            user = await self.db.get_user(user_id, conn=db)
            if not user:
                raise NotFoundError("User", user_id)

            today_summary = await self.summaries.ensure_today(user_id, conn=db)
            return DashboardSnapshot(
                user=user,
                current_streak=await self.db.get_current_streak(user_id, conn=db),
                longest_streak=await self.db.get_longest_streak(user_id, conn=db),
                today_summary=today_summary,
                recent_logs=await self.db.get_recent_logs(user_id, limit, conn=db),
            )
