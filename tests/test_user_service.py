"""
Tests for users, their totals and settings
"""
import pytest
from decimal import Decimal

from database import NotFoundError, UsernameTakenError, ConstraintViolationError


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_new_user_has_zero_totals_and_defaults(self, app, user):
        assert user.total_swears == 0
        assert user.total_fine == Decimal("0")
        assert user.streak_days == 0
        assert user.display_name == "Test User"

        settings = await app.users.get_settings(user.id)
        assert settings.notifications_enabled is True
        assert settings.dark_mode is True
        assert settings.share_stats is False
        assert settings.auto_location is False
        assert settings.reminder_time is None

    @pytest.mark.asyncio
    async def test_username_taken(self, app, user):
        assert await app.users.is_username_taken("tester")
        with pytest.raises(UsernameTakenError):
            await app.users.create_user("tester")
        with pytest.raises(UsernameTakenError):
            await app.users.create_user("  tester  ")

    @pytest.mark.asyncio
    async def test_empty_username(self, app):
        with pytest.raises(ConstraintViolationError):
            await app.users.create_user("   ")

    @pytest.mark.asyncio
    async def test_missing_user(self, app):
        with pytest.raises(NotFoundError):
            await app.users.get_user(9999)
        with pytest.raises(NotFoundError):
            await app.users.delete_user(9999)

    @pytest.mark.asyncio
    async def test_update_display_name(self, app, user):
        updated = await app.users.update_display_name(user.id, "Renamed")
        assert updated.display_name == "Renamed"


class TestTotals:

    @pytest.mark.asyncio
    async def test_reset_keeps_history(self, app, user, word):
        damn = await word("damn")
        await app.logs.record_event(user.id, damn.id)

        reset = await app.users.reset_statistics(user.id)
        assert reset.total_swears == 0
        assert reset.total_fine == Decimal("0")

        assert len(await app.logs.get_recent_logs(user.id)) == 1
        assert await app.summaries.get_summary(user.id, "2024-03-10") is not None

    @pytest.mark.asyncio
    async def test_totals_count_from_zero_after_reset(self, app, user, word):
        damn = await word("damn")
        shit = await word("shit")
        await app.logs.record_event(user.id, damn.id)
        await app.users.reset_statistics(user.id)
        await app.logs.record_event(user.id, shit.id)

        stats = await app.users.get_statistics(user.id)
        assert stats["total_swears"] == 1
        assert stats["total_fine"] == Decimal("1.00")

    @pytest.mark.asyncio
    async def test_recalculate_rebuilds_from_logs(self, app, user, word):
        damn = await word("damn")
        shit = await word("shit")
        await app.logs.record_event(user.id, damn.id)
        await app.logs.record_event(user.id, shit.id)
        await app.users.reset_statistics(user.id)

        rebuilt = await app.users.recalculate_totals(user.id)
        assert rebuilt.total_swears == 2
        assert rebuilt.total_fine == Decimal("1.25")


class TestRemovalAfterReset:
    """Logs made before a reset no longer count towards the totals"""

    @pytest.mark.asyncio
    async def test_delete_log_made_before_reset(self, app, user, word):
        damn = await word("damn")
        old = await app.logs.record_event(user.id, damn.id)
        await app.users.reset_statistics(user.id)

        await app.logs.delete_log(old.id)

        refreshed = await app.users.get_user(user.id)
        assert refreshed.total_swears == 0
        assert refreshed.total_fine == Decimal("0")
        assert (await app.summaries.get_summary(user.id, "2024-03-10")).is_clean_day is True

    @pytest.mark.asyncio
    async def test_delete_old_log_keeps_newer_totals(self, app, user, word):
        damn = await word("damn")
        old = await app.logs.record_event(user.id, damn.id)
        await app.users.reset_statistics(user.id)
        await app.logs.record_event(user.id, damn.id)

        await app.logs.delete_log(old.id)

        refreshed = await app.users.get_user(user.id)
        assert refreshed.total_swears == 1
        assert refreshed.total_fine == Decimal("0.25")

    @pytest.mark.asyncio
    async def test_delete_log_made_after_reset(self, app, user, word):
        damn = await word("damn")
        shit = await word("shit")
        await app.logs.record_event(user.id, damn.id)
        await app.users.reset_statistics(user.id)
        new = await app.logs.record_event(user.id, shit.id)

        await app.logs.delete_log(new.id)

        refreshed = await app.users.get_user(user.id)
        assert refreshed.total_swears == 0
        assert refreshed.total_fine == Decimal("0")

    @pytest.mark.asyncio
    async def test_purge_word_used_before_reset(self, app, user, word):
        damn = await word("damn")
        shit = await word("shit")
        await app.logs.record_event(user.id, damn.id)
        await app.users.reset_statistics(user.id)
        await app.logs.record_event(user.id, damn.id)
        await app.logs.record_event(user.id, shit.id)

        assert await app.words.purge_word(damn.id) == 2

        refreshed = await app.users.get_user(user.id)
        assert refreshed.total_swears == 1
        assert refreshed.total_fine == Decimal("1.00")
        assert (await app.summaries.get_summary(user.id, "2024-03-10")).swear_count == 1

    @pytest.mark.asyncio
    async def test_recalculate_counts_whole_log_again(self, app, user, word):
        damn = await word("damn")
        old = await app.logs.record_event(user.id, damn.id)
        await app.users.reset_statistics(user.id)
        await app.users.recalculate_totals(user.id)

        await app.logs.delete_log(old.id)

        refreshed = await app.users.get_user(user.id)
        assert refreshed.total_swears == 0
        assert refreshed.total_fine == Decimal("0")


class TestDeleteUser:

    @pytest.mark.asyncio
    async def test_delete_removes_all_owned_rows(self, app, user, word):
        damn = await word("damn")
        await app.streaks.ensure_started(user.id)
        await app.fines.set_custom_fine(user.id, damn.id, "0.75")
        log = await app.logs.record_event(user.id, damn.id)

        assert await app.users.delete_user(user.id) is True

        assert await app.users.get_user_by_username("tester") is None
        assert await app.db.get_log(log.id) is None
        assert await app.db.get_settings(user.id) is None
        assert await app.fines.get_user_word(user.id, damn.id) is None
        assert await app.streaks.get_streak_history(user.id) == []
        assert await app.summaries.get_all(user.id) == []

    @pytest.mark.asyncio
    async def test_other_users_untouched(self, app, user, word):
        other = await app.users.create_user("other")
        damn = await word("damn")
        await app.logs.record_event(other.id, damn.id)

        await app.users.delete_user(user.id)

        assert len(await app.logs.get_recent_logs(other.id)) == 1
        assert await app.words.get_word(damn.id) is not None


class TestSettings:

    @pytest.mark.asyncio
    async def test_update_settings(self, app, user):
        settings = await app.users.update_settings(
            user.id, dark_mode=False, reminder_time="21:30"
        )
        assert settings.dark_mode is False
        assert settings.reminder_time == "21:30"
        assert settings.notifications_enabled is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["9:30", "24:00", "21:60", "evening", 830, True])
    async def test_invalid_reminder_time(self, app, user, value):
        with pytest.raises(ConstraintViolationError):
            await app.users.update_settings(user.id, reminder_time=value)

    @pytest.mark.asyncio
    async def test_unknown_setting(self, app, user):
        with pytest.raises(ConstraintViolationError):
            await app.users.update_settings(user.id, font_size=14)

    @pytest.mark.asyncio
    async def test_settings_for_missing_user(self, app):
        with pytest.raises(NotFoundError):
            await app.users.update_settings(9999, dark_mode=False)
