"""
Persistent local key-value store for the chat transcript and user profile.
Uses SQLite for persistence, standing in for the browser's local storage.
"""
import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Optional

from config import Config
from models.api_models import Message, UserContext
from utils.constants import GREETING_MESSAGE, StorageKeys
from utils.logger import client_logger


class LocalStore:
    """
    SQLite-backed key-value store with JSON values.
    """

    def __init__(self, db_path: str):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._db_path = db_path
        self._local = threading.local()
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, 'conn'):
            self._local.conn = sqlite3.connect(self._db_path, check_same_thread=False)
        return self._local.conn

    def _init_db(self) -> None:
        conn = self._get_conn()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS local_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        conn.commit()

    def get(self, key: str) -> Optional[Any]:
        """Get a stored value, or None when the key is absent."""
        cursor = self._get_conn().execute("SELECT value FROM local_store WHERE key = ?", (key,))
        row = cursor.fetchone()
        return json.loads(row[0]) if row else None

    def set(self, key: str, value: Any) -> None:
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO local_store (key, value) VALUES (?, ?)",
            (key, json.dumps(value, ensure_ascii=False))
        )
        conn.commit()

    def remove(self, key: str) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM local_store WHERE key = ?", (key,))
        conn.commit()

    def clear(self) -> None:
        """Remove every key."""
        conn = self._get_conn()
        cursor = conn.execute("DELETE FROM local_store")
        conn.commit()
        client_logger.info(f"Local store cleared: {cursor.rowcount} keys removed")

    def close(self) -> None:
        if hasattr(self._local, 'conn'):
            self._local.conn.close()
            del self._local.conn


class ChatHistoryStore:
    """Transcript and profile persistence on top of a LocalStore."""

    def __init__(self, store: LocalStore):
        self.store = store

    @classmethod
    def from_config(cls) -> "ChatHistoryStore":
        """Open the history store at the configured HISTORY_DB_PATH."""
        return cls(LocalStore(Config.HISTORY_DB_PATH))

    @staticmethod
    def greeting_transcript() -> list[Message]:
        """Initial transcript: a single assistant greeting."""
        return [Message(role="assistant", content=GREETING_MESSAGE)]

    def load_messages(self) -> list[Message]:
        saved = self.store.get(StorageKeys.CHAT_MESSAGES)
        if not saved:
            return self.greeting_transcript()
        return [Message.model_validate(m) for m in saved]

    def save_messages(self, messages: list[Message]) -> None:
        self.store.set(StorageKeys.CHAT_MESSAGES, [m.model_dump() for m in messages])

    def load_user_context(self) -> Optional[UserContext]:
        saved = self.store.get(StorageKeys.USER_CONTEXT)
        return UserContext.model_validate(saved) if saved else None

    def save_user_context(self, context: Optional[UserContext]) -> None:
        """Persist the profile; None removes it."""
        if context is None:
            self.store.remove(StorageKeys.USER_CONTEXT)
        else:
            self.store.set(StorageKeys.USER_CONTEXT, context.model_dump())

    def needs_onboarding(self) -> bool:
        return self.store.get(StorageKeys.USER_CONTEXT) is None

    def reset(self) -> list[Message]:
        """Wipe everything and return the fresh greeting transcript."""
        self.store.clear()
        return self.greeting_transcript()
