"""
Конфигурация SwearJar
"""
import os
from pathlib import Path
from dotenv import load_dotenv
import pytz

# Загружаем переменные окружения
load_dotenv()

# Базовые пути
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
DATA_DIR.mkdir(exist_ok=True)

DATABASE_PATH = Path(os.getenv("DATABASE_PATH", str(DATA_DIR / "swearjar.db")))

# Локальная временная зона устройства - по ней считаются календарные дни
TIMEZONE = os.getenv("TIMEZONE", "Europe/Kiev")

# Главный экран
RECENT_LOGS_LIMIT = int(os.getenv("RECENT_LOGS_LIMIT", "10"))
DEFAULT_CURRENCY_SYMBOL = os.getenv("DEFAULT_CURRENCY_SYMBOL", "$")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# Валидация конфига
def validate_config():
    """Проверяет корректность параметров"""
    errors = []

    if TIMEZONE not in pytz.all_timezones_set:
        errors.append(f"TIMEZONE неизвестна: {TIMEZONE}")

    if RECENT_LOGS_LIMIT <= 0:
        errors.append("RECENT_LOGS_LIMIT должен быть больше нуля")

    if LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        errors.append(f"LOG_LEVEL неизвестен: {LOG_LEVEL}")

    if not DATABASE_PATH.parent.exists():
        errors.append(f"Директория для БД не существует: {DATABASE_PATH.parent}")

    if errors:
        raise ValueError(f"Ошибки конфигурации:\n" + "\n".join(f"- {e}" for e in errors))

if __name__ == "__main__":
    validate_config()
    print("✅ Конфигурация валидна!")
