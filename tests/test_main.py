"""
Tests for the dashboard snapshot and daily maintenance
"""
import pytest
from decimal import Decimal

from database import NotFoundError


class TestDashboardSnapshot:

    @pytest.mark.asyncio
    async def test_snapshot_contents(self, app, user, word, clock):
        damn = await word("damn")
        for _ in range(3):
            await app.streaks.extend(user.id)
            clock.advance(days=1)
        await app.logs.record_event(user.id, damn.id, mood="frustrated")
        clock.advance(days=1)
        await app.streaks.extend(user.id)

        snapshot = await app.dashboard.get_dashboard_snapshot(user.id)

        assert snapshot.user.total_swears == 1
        assert snapshot.user.total_fine == Decimal("0.25")
        assert snapshot.current_streak_days == 1
        assert snapshot.longest_streak.streak_length == 3
        assert snapshot.today_summary.date == "2024-03-14"
        assert snapshot.today_summary.is_clean_day is True
        assert [log.word_id for log in snapshot.recent_logs] == [damn.id]

    @pytest.mark.asyncio
    async def test_snapshot_for_fresh_user(self, app, user):
        snapshot = await app.dashboard.get_dashboard_snapshot(user.id)
        assert snapshot.current_streak is None
        assert snapshot.longest_streak is None
        assert snapshot.current_streak_days == 0
        assert snapshot.recent_logs == []

    @pytest.mark.asyncio
    async def test_recent_logs_limit(self, app, user, word, clock):
        damn = await word("damn")
        for _ in range(5):
            await app.logs.record_event(user.id, damn.id)
            clock.advance(minutes=1)

        snapshot = await app.dashboard.get_dashboard_snapshot(user.id, limit=2)
        assert len(snapshot.recent_logs) == 2

    @pytest.mark.asyncio
    async def test_snapshot_for_missing_user(self, app):
        with pytest.raises(NotFoundError):
            await app.dashboard.get_dashboard_snapshot(9999)


class TestDailyCheck:

    @pytest.mark.asyncio
    async def test_daily_check_is_idempotent(self, app, user):
        first = await app.run_daily_check()
        second = await app.run_daily_check()

        assert first == {"checked": 1, "failed": 0}
        assert second == first
        assert await app.streaks.get_current_length(user.id) == 1
        assert len(await app.summaries.get_all(user.id)) == 1

    @pytest.mark.asyncio
    async def test_daily_check_over_several_days(self, app, user, word, clock):
        other = await app.users.create_user("other")
        damn = await word("damn")

        for day in range(3):
            if day == 1:
                await app.logs.record_event(other.id, damn.id)
            await app.run_daily_check()
            clock.advance(days=1)

        assert await app.streaks.get_current_length(user.id) == 3
        assert await app.streaks.get_current_length(other.id) == 1
        assert await app.summaries.get_clean_day_count(user.id) == 3
        assert await app.summaries.get_clean_day_count(other.id) == 2

    @pytest.mark.asyncio
    async def test_initialize_is_repeatable(self, app):
        await app.initialize()
        await app.initialize()
        assert len(await app.words.get_words()) == 8
