"""
Асинхронная работа с SQLite базой данных
"""
import aiosqlite
import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import List, Dict, Any, Optional, Tuple
from pathlib import Path

from .models import ALL_TABLES, ALL_INDEXES
from .entities import (
    User, SwearWord, UserWord, SwearLog, UserSettings,
    StreakHistory, DailySummary, to_decimal,
)
from .errors import ConstraintViolationError, StorageFailureError


logger = logging.getLogger(__name__)

SETTINGS_COLUMNS = (
    "notifications_enabled",
    "dark_mode",
    "reminder_time",
    "share_stats",
    "auto_location",
)


def _flag(value: Optional[bool]) -> Optional[int]:
    return None if value is None else int(bool(value))


def _money(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(to_decimal(value))


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    @asynccontextmanager
    async def transaction(self, conn: aiosqlite.Connection = None, immediate: bool = True):
        """
        Открывает транзакцию или переиспользует уже открытую

        Если conn передан - вызывающий владеет транзакцией, здесь ничего
        не коммитится. Иначе открывается новое соединение: BEGIN IMMEDIATE
        для записи, BEGIN для согласованного чтения. Ошибки драйвера
        превращаются в ConstraintViolationError / StorageFailureError.
        """
        if conn is not None:
            yield conn
            return

        try:
            async with aiosqlite.connect(self.db_path, isolation_level=None) as db:
                db.row_factory = aiosqlite.Row
                await db.execute("PRAGMA foreign_keys = ON")
                await db.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
                try:
                    yield db
                except BaseException:
                    await db.rollback()
                    raise
                else:
                    await db.commit()
        except aiosqlite.IntegrityError as e:
            logger.warning(f"⚠️ Транзакция отменена, нарушено ограничение: {e}")
            raise ConstraintViolationError(str(e)) from e
        except aiosqlite.Error as e:
            logger.error(f"❌ Ошибка SQLite, транзакция отменена: {e}")
            raise StorageFailureError(str(e)) from e

    def _read(self, conn: aiosqlite.Connection = None):
        return self.transaction(conn, immediate=False)

    async def init_db(self):
        """Инициализация базы данных"""
        async with self.transaction() as db:
            for table_sql in ALL_TABLES:
                await db.execute(table_sql)
            for index_sql in ALL_INDEXES:
                await db.execute(index_sql)

    async def _fetch_one(self, db, query: str, params=()) -> Optional[aiosqlite.Row]:
        async with db.execute(query, params) as cursor:
            return await cursor.fetchone()

    async def _fetch_all(self, db, query: str, params=()) -> List[aiosqlite.Row]:
        async with db.execute(query, params) as cursor:
            return await cursor.fetchall()

    # === USERS ===

    async def create_user(self, username: str, display_name: Optional[str],
                          created_at: str, conn=None) -> User:
        """Создает пользователя с нулевой статистикой"""
        async with self.transaction(conn) as db:
            cursor = await db.execute("""
                INSERT INTO users (username, display_name, created_at, last_active)
                VALUES (?, ?, ?, ?)
            """, (username, display_name, created_at, created_at))
            return await self.get_user(cursor.lastrowid, conn=db)

    async def get_user(self, user_id: int, conn=None) -> Optional[User]:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, "SELECT * FROM users WHERE id = ?", (user_id,))
            return User.from_row(row) if row else None

    async def get_user_by_username(self, username: str, conn=None) -> Optional[User]:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, "SELECT * FROM users WHERE username = ?", (username,))
            return User.from_row(row) if row else None

    async def get_all_users(self, conn=None) -> List[User]:
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, "SELECT * FROM users ORDER BY id")
            return [User.from_row(row) for row in rows]

    async def update_user_display_name(self, user_id: int, display_name: Optional[str],
                                       conn=None) -> bool:
        async with self.transaction(conn) as db:
            cursor = await db.execute(
                "UPDATE users SET display_name = ? WHERE id = ?",
                (display_name, user_id)
            )
            return cursor.rowcount > 0

    async def add_to_user_totals(self, user_id: int, swears: int, fine: Decimal,
                                 last_active: str = None, conn=None) -> bool:
        """
        Прибавляет к накопленной статистике пользователя

        Сумма считается в Decimal, поэтому read-modify-write выполняется
        внутри транзакции записи.
        """
        async with self.transaction(conn) as db:
            row = await self._fetch_one(
                db, "SELECT total_swears, total_fine FROM users WHERE id = ?", (user_id,)
            )
            if not row:
                return False

            total_swears = row["total_swears"] + swears
            total_fine = to_decimal(row["total_fine"]) + to_decimal(fine)
            if total_swears < 0 or total_fine < 0:
                raise ConstraintViolationError(
                    f"User {user_id} totals would become negative"
                )

            await db.execute("""
                UPDATE users
                SET total_swears = ?,
                    total_fine = ?,
                    last_active = COALESCE(?, last_active)
                WHERE id = ?
            """, (total_swears, str(total_fine), last_active, user_id))
            return True

    async def set_user_totals(self, user_id: int, total_swears: int, total_fine: Decimal,
                              since_log_id: int = 0, conn=None) -> bool:
        """
        Перезаписывает итоги пользователя

        since_log_id - последняя запись журнала, не вошедшая в итоги
        (0 - итоги посчитаны по всему журналу)
        """
        async with self.transaction(conn) as db:
            cursor = await db.execute("""
                UPDATE users
                SET total_swears = ?, total_fine = ?, totals_since_log_id = ?
                WHERE id = ?
            """, (total_swears, _money(total_fine), since_log_id, user_id))
            return cursor.rowcount > 0

    async def set_user_streak_days(self, user_id: int, streak_days: int, conn=None):
        async with self.transaction(conn) as db:
            await db.execute(
                "UPDATE users SET streak_days = ? WHERE id = ?",
                (streak_days, user_id)
            )

    async def delete_user(self, user_id: int, conn=None) -> bool:
        """Удаляет пользователя вместе со всеми зависимыми строками"""
        async with self.transaction(conn) as db:
            for table in ("daily_summaries", "streak_history", "user_settings",
                          "swear_logs", "user_words"):
                await db.execute(f"DELETE FROM {table} WHERE user_id = ?", (user_id,))
            cursor = await db.execute("DELETE FROM users WHERE id = ?", (user_id,))
            return cursor.rowcount > 0

    # === SWEAR WORDS ===

    async def create_word(self, word: str, severity: str, default_fine: Decimal,
                          is_custom: bool = False, conn=None) -> SwearWord:
        async with self.transaction(conn) as db:
            cursor = await db.execute("""
                INSERT INTO swear_words (word, severity, default_fine, is_custom)
                VALUES (?, ?, ?, ?)
            """, (word, severity, _money(default_fine), _flag(is_custom)))
            return await self.get_word(cursor.lastrowid, conn=db)

    async def get_word(self, word_id: int, conn=None) -> Optional[SwearWord]:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, "SELECT * FROM swear_words WHERE id = ?", (word_id,))
            return SwearWord.from_row(row) if row else None

    async def get_word_by_text(self, word: str, conn=None) -> Optional[SwearWord]:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, "SELECT * FROM swear_words WHERE word = ?", (word,))
            return SwearWord.from_row(row) if row else None

    async def get_words(self, severity: str = None, is_custom: bool = None,
                        include_retired: bool = False, conn=None) -> List[SwearWord]:
        """Получает словарь с опциональной фильтрацией"""
        query = "SELECT * FROM swear_words WHERE 1 = 1"
        params = []

        if severity:
            query += " AND severity = ?"
            params.append(severity)

        if is_custom is not None:
            query += " AND is_custom = ?"
            params.append(_flag(is_custom))

        if not include_retired:
            query += " AND is_retired = 0"

        query += " ORDER BY word"

        async with self._read(conn) as db:
            rows = await self._fetch_all(db, query, params)
            return [SwearWord.from_row(row) for row in rows]

    async def count_words(self, include_custom: bool = True, conn=None) -> int:
        """Количество слов в словаре без выведенных из него"""
        query = "SELECT COUNT(*) AS count FROM swear_words WHERE is_retired = 0"
        if not include_custom:
            query += " AND is_custom = 0"

        async with self._read(conn) as db:
            row = await self._fetch_one(db, query)
            return row["count"]

    async def search_words(self, text: str, include_retired: bool = False,
                           conn=None) -> List[SwearWord]:
        query = "SELECT * FROM swear_words WHERE word LIKE ? ESCAPE '\\'"
        if not include_retired:
            query += " AND is_retired = 0"
        query += " ORDER BY word"

        async with self._read(conn) as db:
            rows = await self._fetch_all(db, query, (f"%{_escape_like(text)}%",))
            return [SwearWord.from_row(row) for row in rows]

    async def update_word(self, word_id: int, severity: str = None,
                          default_fine: Decimal = None, is_retired: bool = None,
                          conn=None) -> bool:
        """Обновляет слово в словаре"""
        updates = []
        params = []

        if severity is not None:
            updates.append("severity = ?")
            params.append(severity)

        if default_fine is not None:
            updates.append("default_fine = ?")
            params.append(_money(default_fine))

        if is_retired is not None:
            updates.append("is_retired = ?")
            params.append(_flag(is_retired))

        if not updates:
            return False

        params.append(word_id)
        async with self.transaction(conn) as db:
            cursor = await db.execute(
                f"UPDATE swear_words SET {', '.join(updates)} WHERE id = ?", params
            )
            return cursor.rowcount > 0

    async def count_logs_for_word(self, word_id: int, conn=None) -> int:
        async with self._read(conn) as db:
            row = await self._fetch_one(
                db, "SELECT COUNT(*) AS count FROM swear_logs WHERE word_id = ?", (word_id,)
            )
            return row["count"]

    async def delete_word(self, word_id: int, conn=None) -> Dict[str, Any]:
        """
        Удаляет слово каскадно: настройки пользователей и записи журнала

        Ссылки из дневных сводок обнуляются, а не удаляются.

        Returns:
            {
                "deleted": bool,
                "removed_logs": int,
                "affected_days": [(user_id, date), ...],
                "removed_totals": {user_id: (count, Decimal)}  # только записи, входящие в итоги
            }
        """
        async with self.transaction(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT l.user_id, l.log_date, l.fine_amount,
                       l.id > u.totals_since_log_id AS in_totals
                FROM swear_logs l
                JOIN users u ON u.id = l.user_id
                WHERE l.word_id = ?
                ORDER BY l.user_id, l.log_date
            """, (word_id,))

            affected_days = []
            removed_totals: Dict[int, Tuple[int, Decimal]] = {}
            for row in rows:
                key = (row["user_id"], row["log_date"])
                if key not in affected_days:
                    affected_days.append(key)
                if not row["in_totals"]:
                    continue
                count, fine = removed_totals.get(row["user_id"], (0, Decimal("0")))
                removed_totals[row["user_id"]] = (count + 1, fine + to_decimal(row["fine_amount"]))

            await db.execute("DELETE FROM swear_logs WHERE word_id = ?", (word_id,))
            await db.execute("DELETE FROM user_words WHERE word_id = ?", (word_id,))
            await db.execute("""
                UPDATE daily_summaries SET most_common_word_id = NULL
                WHERE most_common_word_id = ?
            """, (word_id,))
            cursor = await db.execute("DELETE FROM swear_words WHERE id = ?", (word_id,))

            return {
                "deleted": cursor.rowcount > 0,
                "removed_logs": len(rows),
                "affected_days": affected_days,
                "removed_totals": removed_totals,
            }

    # === USER WORDS ===

    async def get_user_word(self, user_id: int, word_id: int, conn=None) -> Optional[UserWord]:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, """
                SELECT * FROM user_words WHERE user_id = ? AND word_id = ?
            """, (user_id, word_id))
            return UserWord.from_row(row) if row else None

    async def create_user_word(self, user_id: int, word_id: int,
                               custom_fine: Optional[Decimal], is_active: bool = True,
                               conn=None) -> UserWord:
        async with self.transaction(conn) as db:
            await db.execute("""
                INSERT INTO user_words (user_id, word_id, custom_fine, is_active)
                VALUES (?, ?, ?, ?)
            """, (user_id, word_id, _money(custom_fine), _flag(is_active)))
            return await self.get_user_word(user_id, word_id, conn=db)

    async def set_user_word_fine(self, user_id: int, word_id: int,
                                 custom_fine: Optional[Decimal], conn=None) -> bool:
        """Меняет персональный штраф; None - вернуться к штрафу слова"""
        async with self.transaction(conn) as db:
            cursor = await db.execute("""
                UPDATE user_words SET custom_fine = ?
                WHERE user_id = ? AND word_id = ?
            """, (_money(custom_fine), user_id, word_id))
            return cursor.rowcount > 0

    async def set_user_word_active(self, user_id: int, word_id: int, is_active: bool,
                                   conn=None) -> bool:
        async with self.transaction(conn) as db:
            cursor = await db.execute("""
                UPDATE user_words SET is_active = ?
                WHERE user_id = ? AND word_id = ?
            """, (_flag(is_active), user_id, word_id))
            return cursor.rowcount > 0

    async def get_active_user_words(self, user_id: int, conn=None) -> List[UserWord]:
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM user_words
                WHERE user_id = ? AND is_active = 1
                ORDER BY word_id
            """, (user_id,))
            return [UserWord.from_row(row) for row in rows]

    # === SWEAR LOGS ===

    async def insert_log(self, user_id: int, word_id: int, timestamp: str, log_date: str,
                         fine_amount: Decimal, mood: str = None, context: str = None,
                         location: str = None, conn=None) -> SwearLog:
        """Добавляет запись журнала; штраф фиксируется на момент записи"""
        async with self.transaction(conn) as db:
            cursor = await db.execute("""
                INSERT INTO swear_logs
                (user_id, word_id, timestamp, log_date, mood, context, fine_amount, location)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (user_id, word_id, timestamp, log_date, mood, context,
                  _money(fine_amount), location))
            return await self.get_log(cursor.lastrowid, conn=db)

    async def get_log(self, log_id: int, conn=None) -> Optional[SwearLog]:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, "SELECT * FROM swear_logs WHERE id = ?", (log_id,))
            return SwearLog.from_row(row) if row else None

    async def update_log_worth_it(self, log_id: int, worth_it: Optional[bool],
                                  conn=None) -> bool:
        async with self.transaction(conn) as db:
            cursor = await db.execute(
                "UPDATE swear_logs SET worth_it = ? WHERE id = ?",
                (_flag(worth_it), log_id)
            )
            return cursor.rowcount > 0

    async def delete_log(self, log_id: int, conn=None) -> bool:
        async with self.transaction(conn) as db:
            cursor = await db.execute("DELETE FROM swear_logs WHERE id = ?", (log_id,))
            return cursor.rowcount > 0

    async def get_logs_for_day(self, user_id: int, date: str, conn=None) -> List[SwearLog]:
        """Записи за календарный день в хронологическом порядке"""
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM swear_logs
                WHERE user_id = ? AND log_date = ?
                ORDER BY timestamp, id
            """, (user_id, date))
            return [SwearLog.from_row(row) for row in rows]

    async def get_logs_in_range(self, user_id: int, start: str, end: str,
                                conn=None) -> List[SwearLog]:
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM swear_logs
                WHERE user_id = ? AND log_date >= ? AND log_date <= ?
                ORDER BY timestamp DESC, id DESC
            """, (user_id, start, end))
            return [SwearLog.from_row(row) for row in rows]

    async def get_recent_logs(self, user_id: int, limit: int = 10, conn=None) -> List[SwearLog]:
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM swear_logs
                WHERE user_id = ?
                ORDER BY timestamp DESC, id DESC
                LIMIT ?
            """, (user_id, limit))
            return [SwearLog.from_row(row) for row in rows]

    async def has_logs_for_day(self, user_id: int, date: str, conn=None) -> bool:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, """
                SELECT 1 FROM swear_logs WHERE user_id = ? AND log_date = ? LIMIT 1
            """, (user_id, date))
            return row is not None

    async def get_last_log_id(self, user_id: int, conn=None) -> int:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, """
                SELECT COALESCE(MAX(id), 0) AS last_id FROM swear_logs WHERE user_id = ?
            """, (user_id,))
            return row["last_id"]

    async def get_logs_by_mood(self, user_id: int, mood: str, conn=None) -> List[SwearLog]:
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM swear_logs
                WHERE user_id = ? AND mood = ?
                ORDER BY timestamp DESC, id DESC
            """, (user_id, mood))
            return [SwearLog.from_row(row) for row in rows]

    async def get_logs_by_word(self, user_id: int, word_id: int, conn=None) -> List[SwearLog]:
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM swear_logs
                WHERE user_id = ? AND word_id = ?
                ORDER BY timestamp DESC, id DESC
            """, (user_id, word_id))
            return [SwearLog.from_row(row) for row in rows]

    async def get_log_totals(self, user_id: int, conn=None) -> Tuple[int, Decimal]:
        """Количество записей и сумма штрафов пользователя по журналу"""
        async with self._read(conn) as db:
            rows = await self._fetch_all(
                db, "SELECT fine_amount FROM swear_logs WHERE user_id = ?", (user_id,)
            )
            total = sum((to_decimal(row["fine_amount"]) for row in rows), Decimal("0"))
            return len(rows), total

    # === USER SETTINGS ===

    async def create_settings(self, user_id: int, conn=None) -> UserSettings:
        async with self.transaction(conn) as db:
            await db.execute("INSERT INTO user_settings (user_id) VALUES (?)", (user_id,))
            return await self.get_settings(user_id, conn=db)

    async def get_settings(self, user_id: int, conn=None) -> Optional[UserSettings]:
        async with self._read(conn) as db:
            row = await self._fetch_one(
                db, "SELECT * FROM user_settings WHERE user_id = ?", (user_id,)
            )
            return UserSettings.from_row(row) if row else None

    async def update_settings(self, user_id: int, changes: Dict[str, Any], conn=None) -> bool:
        """Обновляет настройки; допускаются только известные колонки"""
        unknown = set(changes) - set(SETTINGS_COLUMNS)
        if unknown:
            raise ConstraintViolationError(f"Unknown settings: {', '.join(sorted(unknown))}")
        if not changes:
            return False

        updates = []
        params = []
        for column, value in changes.items():
            updates.append(f"{column} = ?")
            params.append(value if column == "reminder_time" else _flag(value))

        params.append(user_id)
        async with self.transaction(conn) as db:
            cursor = await db.execute(
                f"UPDATE user_settings SET {', '.join(updates)} WHERE user_id = ?", params
            )
            return cursor.rowcount > 0

    # === STREAK HISTORY ===

    async def create_streak(self, user_id: int, start_date: str, day: str,
                            conn=None) -> StreakHistory:
        """Открывает новую серию длиной 1 день"""
        async with self.transaction(conn) as db:
            cursor = await db.execute("""
                INSERT INTO streak_history
                (user_id, streak_length, start_date, is_current, last_extended_date)
                VALUES (?, 1, ?, 1, ?)
            """, (user_id, start_date, day))
            row = await self._fetch_one(
                db, "SELECT * FROM streak_history WHERE id = ?", (cursor.lastrowid,)
            )
            return StreakHistory.from_row(row)

    async def get_current_streak(self, user_id: int, conn=None) -> Optional[StreakHistory]:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, """
                SELECT * FROM streak_history WHERE user_id = ? AND is_current = 1
            """, (user_id,))
            return StreakHistory.from_row(row) if row else None

    async def extend_streak(self, streak_id: int, streak_length: int, day: str,
                            conn=None) -> bool:
        async with self.transaction(conn) as db:
            cursor = await db.execute("""
                UPDATE streak_history
                SET streak_length = ?, last_extended_date = ?
                WHERE id = ? AND is_current = 1
            """, (streak_length, day, streak_id))
            return cursor.rowcount > 0

    async def close_streak(self, streak_id: int, end_date: str, conn=None) -> bool:
        async with self.transaction(conn) as db:
            cursor = await db.execute("""
                UPDATE streak_history
                SET end_date = ?, is_current = 0
                WHERE id = ? AND is_current = 1
            """, (end_date, streak_id))
            return cursor.rowcount > 0

    async def get_longest_streak(self, user_id: int, conn=None) -> Optional[StreakHistory]:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, """
                SELECT * FROM streak_history
                WHERE user_id = ?
                ORDER BY streak_length DESC, id
                LIMIT 1
            """, (user_id,))
            return StreakHistory.from_row(row) if row else None

    async def get_streaks(self, user_id: int, min_length: int = None,
                          conn=None) -> List[StreakHistory]:
        """Все серии пользователя, новые первыми"""
        query = "SELECT * FROM streak_history WHERE user_id = ?"
        params = [user_id]
        if min_length is not None:
            query += " AND streak_length > ?"
            params.append(min_length)
        query += " ORDER BY start_date DESC, id DESC"

        async with self._read(conn) as db:
            rows = await self._fetch_all(db, query, params)
            return [StreakHistory.from_row(row) for row in rows]

    async def get_streaks_in_range(self, user_id: int, start: str, end: str,
                                   conn=None) -> List[StreakHistory]:
        """
        Серии, начавшиеся не раньше start и закончившиеся до end (или текущие)

        start / end - ISO-моменты в UTC, сравниваются как строки
        """
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM streak_history
                WHERE user_id = ?
                  AND start_date >= ? AND start_date < ?
                  AND (end_date IS NULL OR end_date < ?)
                ORDER BY start_date DESC, id DESC
            """, (user_id, start, end, end))
            return [StreakHistory.from_row(row) for row in rows]

    # === DAILY SUMMARIES ===

    async def upsert_summary(self, summary: DailySummary, conn=None) -> DailySummary:
        """Вставляет или обновляет сводку по уникальному (user_id, date)"""
        mood = summary.most_common_mood.value if summary.most_common_mood else None
        async with self.transaction(conn) as db:
            await db.execute("""
                INSERT INTO daily_summaries
                (user_id, date, swear_count, total_fine, most_common_word_id,
                 most_common_mood, is_clean_day)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, date) DO UPDATE SET
                    swear_count = excluded.swear_count,
                    total_fine = excluded.total_fine,
                    most_common_word_id = excluded.most_common_word_id,
                    most_common_mood = excluded.most_common_mood,
                    is_clean_day = excluded.is_clean_day
            """, (summary.user_id, summary.date, summary.swear_count,
                  _money(summary.total_fine), summary.most_common_word_id,
                  mood, _flag(summary.is_clean_day)))
            return await self.get_summary(summary.user_id, summary.date, conn=db)

    async def get_summary(self, user_id: int, date: str, conn=None) -> Optional[DailySummary]:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, """
                SELECT * FROM daily_summaries WHERE user_id = ? AND date = ?
            """, (user_id, date))
            return DailySummary.from_row(row) if row else None

    async def get_summaries(self, user_id: int, conn=None) -> List[DailySummary]:
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM daily_summaries WHERE user_id = ? ORDER BY date DESC
            """, (user_id,))
            return [DailySummary.from_row(row) for row in rows]

    async def get_summaries_in_range(self, user_id: int, start: str, end: str,
                                     conn=None) -> List[DailySummary]:
        """Сводки за период; строки YYYY-MM-DD сравниваются лексикографически"""
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM daily_summaries
                WHERE user_id = ? AND date >= ? AND date <= ?
                ORDER BY date DESC
            """, (user_id, start, end))
            return [DailySummary.from_row(row) for row in rows]

    async def get_clean_days(self, user_id: int, conn=None) -> List[DailySummary]:
        async with self._read(conn) as db:
            rows = await self._fetch_all(db, """
                SELECT * FROM daily_summaries
                WHERE user_id = ? AND is_clean_day = 1
                ORDER BY date DESC
            """, (user_id,))
            return [DailySummary.from_row(row) for row in rows]

    async def get_clean_day_count(self, user_id: int, conn=None) -> int:
        async with self._read(conn) as db:
            row = await self._fetch_one(db, """
                SELECT COUNT(*) AS count FROM daily_summaries
                WHERE user_id = ? AND is_clean_day = 1
            """, (user_id,))
            return row["count"]

    async def get_total_fine(self, user_id: int, since: str = None, conn=None) -> Decimal:
        """Сумма штрафов по сводкам, опционально начиная с даты since"""
        query = "SELECT total_fine FROM daily_summaries WHERE user_id = ?"
        params = [user_id]
        if since:
            query += " AND date >= ?"
            params.append(since)

        async with self._read(conn) as db:
            rows = await self._fetch_all(db, query, params)
            return sum((to_decimal(row["total_fine"]) for row in rows), Decimal("0"))

    async def get_most_common_word(self, user_id: int, since: str = None,
                                   conn=None) -> Optional[int]:
        """Слово, чаще всего бывшее самым частым за день"""
        query = """
            SELECT most_common_word_id, COUNT(*) AS frequency
            FROM daily_summaries
            WHERE user_id = ? AND most_common_word_id IS NOT NULL
        """
        params = [user_id]
        if since:
            query += " AND date >= ?"
            params.append(since)
        query += """
            GROUP BY most_common_word_id
            ORDER BY frequency DESC, most_common_word_id
            LIMIT 1
        """

        async with self._read(conn) as db:
            row = await self._fetch_one(db, query, params)
            return row["most_common_word_id"] if row else None
