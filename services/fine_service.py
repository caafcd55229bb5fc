"""
Расчет штрафа за слово

Персональный штраф пользователя (user_words.custom_fine) важнее
штрафа слова по умолчанию. Значение используется только в момент
записи и никогда не пересчитывается для старых записей.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from database import Database, UserWord, NotFoundError, ConstraintViolationError
from database.entities import to_decimal


logger = logging.getLogger(__name__)


class FineResolver:
    """
    Определяет штраф для пары (пользователь, слово)
    """

    def __init__(self, db: Database):
        self.db = db

    async def resolve(self, user_id: int, word_id: int, conn=None) -> Decimal:
        """
        Возвращает действующий штраф

        Raises:
            NotFoundError: слова нет в словаре
        """
        async with self.db.transaction(conn, immediate=False) as db:
            word = await self.db.get_word(word_id, conn=db)
            if not word:
                raise NotFoundError("SwearWord", word_id)

            user_word = await self.db.get_user_word(user_id, word_id, conn=db)
            if user_word and user_word.custom_fine is not None:
                return user_word.custom_fine

            return word.default_fine

    async def get_or_create_user_word(self, user_id: int, word_id: int, conn=None) -> UserWord:
        """
        Получает настройку слова пользователя или создает ее

        Новый персональный штраф берется из текущего штрафа слова.
        """
        async with self.db.transaction(conn) as db:
            user_word = await self.db.get_user_word(user_id, word_id, conn=db)
            if user_word:
                return user_word

            if not await self.db.get_user(user_id, conn=db):
                raise NotFoundError("User", user_id)
            word = await self.db.get_word(word_id, conn=db)
            if not word:
                raise NotFoundError("SwearWord", word_id)

            return await self.db.create_user_word(
                user_id, word_id, custom_fine=word.default_fine, conn=db
            )

    async def set_custom_fine(self, user_id: int, word_id: int, fine) -> UserWord:
        """Задает персональный штраф за слово"""
        amount = to_decimal(fine)
        if amount < 0:
            raise ConstraintViolationError(f"Fine must not be negative: {amount}")

        async with self.db.transaction() as db:
            await self.get_or_create_user_word(user_id, word_id, conn=db)
            await self.db.set_user_word_fine(user_id, word_id, amount, conn=db)
            logger.info(f"💰 Пользователь {user_id}: штраф за слово {word_id} = {amount}")
            return await self.db.get_user_word(user_id, word_id, conn=db)

    async def clear_custom_fine(self, user_id: int, word_id: int) -> bool:
        """Сбрасывает персональный штраф к штрафу слова"""
        return await self.db.set_user_word_fine(user_id, word_id, None)

    async def set_word_active(self, user_id: int, word_id: int, active: bool) -> UserWord:
        """Включает или выключает слово в личном списке пользователя"""
        async with self.db.transaction() as db:
            await self.get_or_create_user_word(user_id, word_id, conn=db)
            await self.db.set_user_word_active(user_id, word_id, active, conn=db)
            return await self.db.get_user_word(user_id, word_id, conn=db)

    async def get_active_words(self, user_id: int) -> List[UserWord]:
        return await self.db.get_active_user_words(user_id)

    async def get_user_word(self, user_id: int, word_id: int) -> Optional[UserWord]:
        return await self.db.get_user_word(user_id, word_id)
