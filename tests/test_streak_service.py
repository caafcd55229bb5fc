"""
Tests for the clean-streak state machine
"""
import pytest

from database import NotFoundError


class TestExtend:

    @pytest.mark.asyncio
    async def test_three_clean_days(self, app, user, clock):
        """extend once a day for three days gives a streak of 3"""
        for _ in range(3):
            await app.streaks.extend(user.id)
            clock.advance(days=1)
        clock.advance(days=-1)

        streak = await app.streaks.get_current_streak(user.id)
        assert streak.streak_length == 3
        assert streak.is_current is True
        assert streak.end_date is None

        # повторный вызов в тот же день
        await app.streaks.extend(user.id)
        assert await app.streaks.get_current_length(user.id) == 3
        assert (await app.users.get_user(user.id)).streak_days == 3

    @pytest.mark.asyncio
    async def test_explicit_day_argument(self, app, user):
        await app.streaks.extend(user.id, "2024-03-01")
        await app.streaks.extend(user.id, "2024-03-02")
        await app.streaks.extend(user.id, "2024-03-02")
        assert await app.streaks.get_current_length(user.id) == 2

    @pytest.mark.asyncio
    async def test_day_with_logs_is_not_counted(self, app, user, word):
        damn = await word("damn")
        await app.logs.record_event(user.id, damn.id)

        assert await app.streaks.extend(user.id) is None
        assert await app.streaks.has_active_streak(user.id) is False

    @pytest.mark.asyncio
    async def test_extend_for_missing_user(self, app):
        with pytest.raises(NotFoundError):
            await app.streaks.extend(9999)


class TestBreak:

    @pytest.mark.asyncio
    async def test_logging_closes_active_streak(self, app, user, word, clock):
        for _ in range(2):
            await app.streaks.extend(user.id)
            clock.advance(days=1)
        streak_id = (await app.streaks.get_current_streak(user.id)).id

        damn = await word("damn")
        await app.logs.record_event(user.id, damn.id)

        history = await app.streaks.get_streak_history(user.id)
        assert len(history) == 1
        closed = history[0]
        assert closed.id == streak_id
        assert closed.is_current is False
        assert closed.end_date is not None
        assert closed.streak_length == 2
        assert (await app.users.get_user(user.id)).streak_days == 0

    @pytest.mark.asyncio
    async def test_break_without_streak_is_noop(self, app, user):
        assert await app.streaks.break_streak(user.id) is False
        assert await app.streaks.get_streak_history(user.id) == []

    @pytest.mark.asyncio
    async def test_second_event_same_day_changes_nothing(self, app, user, word):
        await app.streaks.ensure_started(user.id)
        damn = await word("damn")
        await app.logs.record_event(user.id, damn.id)
        await app.logs.record_event(user.id, damn.id)

        history = await app.streaks.get_streak_history(user.id)
        assert len(history) == 1
        assert history[0].is_current is False


class TestStreakHistory:

    @pytest.mark.asyncio
    async def test_new_streak_after_break(self, app, user, word, clock):
        damn = await word("damn")
        await app.streaks.ensure_started(user.id)
        await app.logs.record_event(user.id, damn.id)

        clock.advance(days=1)
        fresh = await app.streaks.extend(user.id)
        assert fresh.streak_length == 1

        history = await app.streaks.get_streak_history(user.id)
        assert len(history) == 2
        assert sum(1 for streak in history if streak.is_current) == 1

    @pytest.mark.asyncio
    async def test_ensure_started_is_idempotent(self, app, user):
        first = await app.streaks.ensure_started(user.id)
        second = await app.streaks.ensure_started(user.id)
        assert first.id == second.id
        assert len(await app.streaks.get_streak_history(user.id)) == 1

    @pytest.mark.asyncio
    async def test_longest_streak_includes_closed(self, app, user, word, clock):
        damn = await word("damn")
        for _ in range(4):
            await app.streaks.extend(user.id)
            clock.advance(days=1)
        await app.logs.record_event(user.id, damn.id)

        clock.advance(days=1)
        await app.streaks.extend(user.id)

        longest = await app.streaks.get_longest_streak(user.id)
        assert longest.streak_length == 4
        assert longest.is_current is False
        assert await app.streaks.get_current_length(user.id) == 1

        longer = await app.streaks.get_streaks_longer_than(user.id, 1)
        assert [streak.streak_length for streak in longer] == [4]

    @pytest.mark.asyncio
    async def test_streaks_in_range(self, app, user, word, clock):
        damn = await word("damn")
        for _ in range(3):
            await app.streaks.extend(user.id)
            clock.advance(days=1)
        # 03-13: первая серия прервана, 03-14: началась новая
        await app.logs.record_event(user.id, damn.id)
        clock.advance(days=1)
        await app.streaks.extend(user.id)

        closed = await app.streaks.get_streaks_in_range(user.id, "2024-03-10", "2024-03-13")
        assert [streak.streak_length for streak in closed] == [3]

        both = await app.streaks.get_streaks_in_range(user.id, "2024-03-10", "2024-03-14")
        assert [streak.is_current for streak in both] == [True, False]

        current_only = await app.streaks.get_streaks_in_range(user.id, "2024-03-11", "2024-03-20")
        assert [streak.streak_length for streak in current_only] == [1]

        assert await app.streaks.get_streaks_in_range(user.id, "2024-03-10", "2024-03-12") == []
