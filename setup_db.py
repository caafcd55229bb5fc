"""
Скрипт для первичной настройки SwearJar
"""
import asyncio
import sys
from pathlib import Path

# Фикс кодировки для Windows
if sys.platform == "win32":
    import codecs
    sys.stdout = codecs.getwriter("utf-8")(sys.stdout.detach())
    sys.stderr = codecs.getwriter("utf-8")(sys.stderr.detach())


async def setup():
    print("🚀 Настройка SwearJar...\n")

    # Проверка .env файла (необязателен - есть значения по умолчанию)
    if not Path(".env").exists():
        print("⚠️ Файл .env не найден, используются значения по умолчанию")
        print("📝 При необходимости создайте его на основе .env.example\n")

    # Проверка зависимостей
    try:
        import aiosqlite
        import dotenv
        import pytz
        print("✅ Все зависимости установлены")
    except ImportError as e:
        print(f"❌ Отсутствует зависимость: {e.name}")
        print("📦 Установите зависимости: pip install -e .")
        return False

    # Проверка конфигурации
    try:
        import config
        config.validate_config()
        print("✅ Конфигурация валидна")
    except Exception as e:
        print(f"❌ Ошибка конфигурации: {e}")
        print("📝 Проверьте файл .env")
        return False

    # Инициализация БД и словаря
    try:
        from main import SwearJarApp
        app = SwearJarApp()
        await app.initialize()
        words = await app.words.get_words()
        print(f"✅ База данных инициализирована: {config.DATABASE_PATH}")
        print(f"📖 Слов в словаре: {len(words)}")
    except Exception as e:
        print(f"❌ Ошибка инициализации БД: {e}")
        return False

    print("\n✨ Настройка завершена успешно!")
    print("🚀 Ежедневное обслуживание: python main.py")
    return True

if __name__ == "__main__":
    result = asyncio.run(setup())
    sys.exit(0 if result else 1)
