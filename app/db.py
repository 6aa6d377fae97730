import logging
import sqlite3
from pathlib import Path

from .logic import contains_casefold
from .settings import Settings

logger = logging.getLogger(__name__)


def _contains_ci(haystack, needle) -> int:
    return int(contains_casefold(haystack, needle))


def connect(db_path: str | Path):
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.create_function("contains_ci", 2, _contains_ci, deterministic=True)
    return conn


def init_db(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    with connect(settings.db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
              id TEXT PRIMARY KEY,
              name TEXT NOT NULL,
              email TEXT NOT NULL UNIQUE,
              password TEXT NOT NULL,
              dob TEXT,
              phone TEXT DEFAULT '',
              created_at TEXT NOT NULL DEFAULT (datetime('now')),
              updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );
            """
        )
        conn.execute(
            """
            CREATE TRIGGER IF NOT EXISTS users_updated_at
            AFTER UPDATE ON users
            FOR EACH ROW
            BEGIN
              UPDATE users SET updated_at = datetime('now') WHERE id = OLD.id;
            END;
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
              id TEXT PRIMARY KEY,
              user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
              amount TEXT NOT NULL,
              type TEXT NOT NULL CHECK(type IN ('income','expense')),
              category TEXT NOT NULL,
              date TEXT NOT NULL,
              note TEXT,
              created_at TEXT NOT NULL DEFAULT (datetime('now')),
              updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );
            """
        )
        conn.execute(
            """
            CREATE TRIGGER IF NOT EXISTS transactions_updated_at
            AFTER UPDATE ON transactions
            FOR EACH ROW
            BEGIN
              UPDATE transactions SET updated_at = datetime('now') WHERE id = OLD.id;
            END;
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_transactions_user_date
            ON transactions(user_id, date DESC)
            """
        )
    logger.info("database ready at %s", settings.db_path)
