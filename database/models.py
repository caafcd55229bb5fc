"""
Модели данных для SQLite
"""

# SQL схемы таблиц

USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE CHECK (length(username) > 0),
    display_name TEXT,
    created_at TEXT NOT NULL,
    last_active TEXT NOT NULL,
    streak_days INTEGER NOT NULL DEFAULT 0 CHECK (streak_days >= 0),
    total_swears INTEGER NOT NULL DEFAULT 0 CHECK (total_swears >= 0),
    total_fine TEXT NOT NULL DEFAULT '0',
    totals_since_log_id INTEGER NOT NULL DEFAULT 0
)
"""

SWEAR_WORDS_TABLE = """
CREATE TABLE IF NOT EXISTS swear_words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word TEXT NOT NULL UNIQUE CHECK (length(word) > 0),
    severity TEXT NOT NULL CHECK (severity IN ('mild', 'moderate', 'severe')),
    default_fine TEXT NOT NULL,
    is_custom INTEGER NOT NULL DEFAULT 0,
    is_retired INTEGER NOT NULL DEFAULT 0
)
"""

USER_WORDS_TABLE = """
CREATE TABLE IF NOT EXISTS user_words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    word_id INTEGER NOT NULL,
    custom_fine TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    FOREIGN KEY (user_id) REFERENCES users (id),
    FOREIGN KEY (word_id) REFERENCES swear_words (id),
    UNIQUE(user_id, word_id)
)
"""

SWEAR_LOGS_TABLE = """
CREATE TABLE IF NOT EXISTS swear_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    word_id INTEGER NOT NULL,
    timestamp TEXT NOT NULL,
    log_date TEXT NOT NULL,
    mood TEXT CHECK (mood IN ('angry', 'frustrated', 'surprised', 'amused', 'stressed', 'other')),
    worth_it INTEGER,
    context TEXT,
    fine_amount TEXT NOT NULL,
    location TEXT,
    FOREIGN KEY (user_id) REFERENCES users (id),
    FOREIGN KEY (word_id) REFERENCES swear_words (id)
)
"""

USER_SETTINGS_TABLE = """
CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL UNIQUE,
    notifications_enabled INTEGER NOT NULL DEFAULT 1,
    dark_mode INTEGER NOT NULL DEFAULT 1,
    reminder_time TEXT,
    share_stats INTEGER NOT NULL DEFAULT 0,
    auto_location INTEGER NOT NULL DEFAULT 0,
    FOREIGN KEY (user_id) REFERENCES users (id)
)
"""

STREAK_HISTORY_TABLE = """
CREATE TABLE IF NOT EXISTS streak_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    streak_length INTEGER NOT NULL CHECK (streak_length > 0),
    start_date TEXT NOT NULL,
    end_date TEXT,
    is_current INTEGER NOT NULL DEFAULT 1,
    last_extended_date TEXT,
    FOREIGN KEY (user_id) REFERENCES users (id)
)
"""

# most_common_word_id - мягкая ссылка: при удалении слова обнуляется вручную
DAILY_SUMMARIES_TABLE = """
CREATE TABLE IF NOT EXISTS daily_summaries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    date TEXT NOT NULL,
    swear_count INTEGER NOT NULL DEFAULT 0 CHECK (swear_count >= 0),
    total_fine TEXT NOT NULL DEFAULT '0',
    most_common_word_id INTEGER,
    most_common_mood TEXT,
    is_clean_day INTEGER NOT NULL DEFAULT 1,
    FOREIGN KEY (user_id) REFERENCES users (id),
    UNIQUE(user_id, date),
    CHECK (is_clean_day = (swear_count = 0))
)
"""

ALL_TABLES = [
    USERS_TABLE,
    SWEAR_WORDS_TABLE,
    USER_WORDS_TABLE,
    SWEAR_LOGS_TABLE,
    USER_SETTINGS_TABLE,
    STREAK_HISTORY_TABLE,
    DAILY_SUMMARIES_TABLE,
]

# Индексы под запросы по диапазонам дат
ALL_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_swear_logs_user_timestamp ON swear_logs (user_id, timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_swear_logs_user_date ON swear_logs (user_id, log_date)",
    "CREATE INDEX IF NOT EXISTS idx_swear_logs_word_id ON swear_logs (word_id)",
    "CREATE INDEX IF NOT EXISTS idx_daily_summaries_user_date ON daily_summaries (user_id, date)",
    "CREATE INDEX IF NOT EXISTS idx_user_words_user_id ON user_words (user_id)",
    # Не больше одной активной серии на пользователя
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_streak_history_one_current "
    "ON streak_history (user_id) WHERE is_current = 1",
]
