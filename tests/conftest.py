"""
Pytest configuration and fixtures

Каждый тест получает собственный файл SQLite в tmp_path
и управляемые часы, чтобы смена календарных дней была детерминированной.
"""
import pytest
import sys
import os
from datetime import datetime, timedelta

import pytz

# Add the parent directory to the path so we can import database/services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Database
from services import LocalCalendar
from main import SwearJarApp


TIMEZONE = "Europe/Kiev"


class FakeClock:
    """Часы, которые двигаются только вручную"""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, days: int = 0, hours: int = 0, minutes: int = 0):
        self.current += timedelta(days=days, hours=hours, minutes=minutes)

    def set(self, value: datetime):
        self.current = value


@pytest.fixture
def clock():
    # 2024-03-10 12:00 по Киеву (UTC+2)
    return FakeClock(datetime(2024, 3, 10, 10, 0, tzinfo=pytz.utc))


@pytest.fixture
def calendar(clock):
    return LocalCalendar(TIMEZONE, clock=clock)


@pytest.fixture
async def db(tmp_path):
    database = Database(tmp_path / "swearjar_test.db")
    await database.init_db()
    return database


@pytest.fixture
async def app(db, calendar):
    swear_jar = SwearJarApp(db=db, calendar=calendar)
    await swear_jar.words.seed_default_words()
    return swear_jar


@pytest.fixture
async def user(app):
    return await app.users.create_user("tester", "Test User")


@pytest.fixture
def word(app):
    """Возвращает слово словаря по тексту"""
    async def _word(text: str):
        found = await app.words.get_word_by_text(text)
        assert found is not None, f"word {text!r} is not seeded"
        return found
    return _word
