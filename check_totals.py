"""
Скрипт для проверки итогов пользователей в БД

Сравнивает total_swears / total_fine с журналом и ищет
пользователей с несколькими активными сериями.
"""
import sqlite3
import sys
from decimal import Decimal

import config

conn = sqlite3.connect(config.DATABASE_PATH)
conn.row_factory = sqlite3.Row
cursor = conn.cursor()

cursor.execute("""
    SELECT id, username, total_swears, total_fine, streak_days, totals_since_log_id
    FROM users ORDER BY id
""")
users = cursor.fetchall()

problems = 0

if not users:
    print("\n❌ Пользователей в БД нет!\n")
else:
    print(f"\n📋 Пользователей в БД: {len(users)}\n")
    for u in users:
        # после reset_statistics в итогах только записи с id > totals_since_log_id
        cursor.execute("""
            SELECT fine_amount FROM swear_logs WHERE user_id = ? AND id > ?
        """, (u["id"], u["totals_since_log_id"]))
        fines = [Decimal(row["fine_amount"]) for row in cursor.fetchall()]
        log_total = sum(fines, Decimal("0"))

        cursor.execute("""
            SELECT COUNT(*) FROM streak_history WHERE user_id = ? AND is_current = 1
        """, (u["id"],))
        current_streaks = cursor.fetchone()[0]

        print(f"ID {u['id']}: {u['username']}")
        print(f"   Ругательств: {u['total_swears']} (в журнале {len(fines)})")
        print(f"   Штраф: {config.DEFAULT_CURRENCY_SYMBOL}{u['total_fine']} (в журнале {log_total})")
        print(f"   Серия: {u['streak_days']} дн.")

        if u["total_swears"] != len(fines) or Decimal(u["total_fine"]) != log_total:
            print("   ⚠️ Итоги расходятся с журналом")
            problems += 1
        if current_streaks > 1:
            print(f"   ❌ Активных серий: {current_streaks}")
            problems += 1
        print()

conn.close()
sys.exit(1 if problems else 0)
