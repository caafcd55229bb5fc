"""
Словарь ругательств
"""
import logging
from typing import List, Optional, Union

from database import (
    Database, SwearWord, Severity, NotFoundError, ConstraintViolationError,
)
from database.entities import to_decimal
from .daily_summary_service import DailySummaryService


logger = logging.getLogger(__name__)

DEFAULT_WORDS = [
    ("damn", Severity.MILD),
    ("hell", Severity.MILD),
    ("crap", Severity.MILD),
    ("ass", Severity.MODERATE),
    ("bastard", Severity.MODERATE),
    ("bitch", Severity.MODERATE),
    ("shit", Severity.SEVERE),
    ("f**k", Severity.SEVERE),
]


def _parse_severity(severity: Union[Severity, str]) -> Severity:
    if isinstance(severity, Severity):
        return severity
    try:
        return Severity(severity)
    except ValueError:
        raise ConstraintViolationError(f"Unknown severity: {severity!r}")


class SwearWordService:
    """
    Управление словарем

    Удаление слова с историей превращается в "вывод из словаря":
    записи журнала остаются, а слово больше нельзя выбрать.
    """

    def __init__(self, db: Database, summaries: DailySummaryService):
        self.db = db
        self.summaries = summaries

    async def add_word(
        self,
        word: str,
        severity: Union[Severity, str],
        default_fine=None,
        is_custom: bool = True
    ) -> SwearWord:
        """
        Добавляет слово; штраф по умолчанию зависит от грубости

        Raises:
            ConstraintViolationError: слово уже есть или штраф не положительный
        """
        word = (word or "").strip()
        if not word:
            raise ConstraintViolationError("Word must not be empty")

        severity = _parse_severity(severity)
        fine = severity.suggested_fine if default_fine is None else to_decimal(default_fine)
        if fine <= 0:
            raise ConstraintViolationError(f"Default fine must be positive: {fine}")

        async with self.db.transaction() as db:
            if await self.db.get_word_by_text(word, conn=db):
                raise ConstraintViolationError(f"Word already exists: {word}")
            created = await self.db.create_word(word, severity.value, fine, is_custom, conn=db)

        logger.info(f"📖 Добавлено слово '{word}' ({severity.value}, {fine})")
        return created

    async def update_word_severity(self, word_id: int, severity: Union[Severity, str]) -> SwearWord:
        """Меняет грубость слова; штраф по умолчанию остается прежним"""
        severity = _parse_severity(severity)
        async with self.db.transaction() as db:
            if not await self.db.update_word(word_id, severity=severity.value, conn=db):
                raise NotFoundError("SwearWord", word_id)
            return await self.db.get_word(word_id, conn=db)

    async def update_default_fine(self, word_id: int, default_fine) -> SwearWord:
        """Меняет штраф по умолчанию; старые записи журнала не меняются"""
        fine = to_decimal(default_fine)
        if fine <= 0:
            raise ConstraintViolationError(f"Default fine must be positive: {fine}")

        async with self.db.transaction() as db:
            if not await self.db.update_word(word_id, default_fine=fine, conn=db):
                raise NotFoundError("SwearWord", word_id)
            return await self.db.get_word(word_id, conn=db)

    async def remove_word(self, word_id: int) -> bool:
        """
        Убирает слово из словаря

        Returns:
            True - слово удалено физически (истории не было),
            False - слово выведено из словаря, история сохранена
        """
        async with self.db.transaction() as db:
            if not await self.db.get_word(word_id, conn=db):
                raise NotFoundError("SwearWord", word_id)

            if await self.db.count_logs_for_word(word_id, conn=db):
                await self.db.update_word(word_id, is_retired=True, conn=db)
                logger.info(f"📦 Слово {word_id} выведено из словаря, история сохранена")
                return False

            await self.db.delete_word(word_id, conn=db)

        logger.info(f"🗑 Слово {word_id} удалено")
        return True

    async def restore_word(self, word_id: int) -> SwearWord:
        async with self.db.transaction() as db:
            if not await self.db.update_word(word_id, is_retired=False, conn=db):
                raise NotFoundError("SwearWord", word_id)
            return await self.db.get_word(word_id, conn=db)

    async def purge_word(self, word_id: int) -> int:
        """
        Удаляет слово вместе с записями журнала

        Итоги пользователей уменьшаются на записи, входящие в итоги
        (сделанные после последнего сброса статистики), затронутые
        сводки пересчитываются.

        Returns:
            Количество удаленных записей журнала
        """
        async with self.db.transaction() as db:
            result = await self.db.delete_word(word_id, conn=db)
            if not result["deleted"]:
                raise NotFoundError("SwearWord", word_id)

            removed = result["removed_logs"]
            for user_id, (count, fine) in result["removed_totals"].items():
                await self.db.add_to_user_totals(user_id, -count, -fine, conn=db)

            for user_id, day in result["affected_days"]:
                await self.summaries.recompute(user_id, day, conn=db)

        logger.warning(f"⚠️ Слово {word_id} удалено вместе с {removed} записями журнала")
        return removed

    async def get_word(self, word_id: int) -> SwearWord:
        word = await self.db.get_word(word_id)
        if not word:
            raise NotFoundError("SwearWord", word_id)
        return word

    async def get_word_by_text(self, word: str) -> Optional[SwearWord]:
        return await self.db.get_word_by_text(word)

    async def get_words(self, severity: Union[Severity, str] = None,
                        include_retired: bool = False) -> List[SwearWord]:
        severity = _parse_severity(severity).value if severity else None
        return await self.db.get_words(severity=severity, include_retired=include_retired)

    async def get_custom_words(self) -> List[SwearWord]:
        return await self.db.get_words(is_custom=True)

    async def get_standard_words(self) -> List[SwearWord]:
        return await self.db.get_words(is_custom=False)

    async def get_most_severe_words(self) -> List[SwearWord]:
        return await self.db.get_words(severity=Severity.SEVERE.value)

    async def get_word_count(self, include_custom: bool = True) -> int:
        return await self.db.count_words(include_custom=include_custom)

    async def search_words(self, text: str) -> List[SwearWord]:
        return await self.db.search_words(text)

    async def seed_default_words(self) -> int:
        """
        Заполняет словарь стандартными словами

        Returns:
            Сколько слов добавлено (уже существующие пропускаются)
        """
        added = 0
        async with self.db.transaction() as db:
            for word, severity in DEFAULT_WORDS:
                if await self.db.get_word_by_text(word, conn=db):
                    continue
                await self.db.create_word(
                    word, severity.value, severity.suggested_fine, is_custom=False, conn=db
                )
                added += 1

        if added:
            logger.info(f"📖 В словарь добавлено стандартных слов: {added}")
        return added
