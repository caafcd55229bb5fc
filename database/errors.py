"""
Ошибки слоя хранения и сервисов
"""


class SwearJarError(Exception):
    """Базовая ошибка приложения"""


class NotFoundError(SwearJarError):
    """Пользователь, слово или запись не найдены"""

    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class UsernameTakenError(SwearJarError):
    """Имя пользователя уже занято"""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already taken: {username}")


class ConstraintViolationError(SwearJarError):
    """Нарушение уникальности, внешнего ключа или доменного ограничения"""


class StorageFailureError(SwearJarError):
    """Ошибка ввода-вывода или транзакции SQLite"""
