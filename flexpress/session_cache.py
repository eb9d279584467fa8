# flexpress/session_cache.py

import threading
import time
import uuid
from typing import Callable

from flexpress.session import QuerySession


class SessionCache:
    """
    In-memory, per-browser query sessions with:
    - sliding TTL (expires ttl_seconds after last touch)
    - thread-safe dict operations (one event loop, but sweep may run from a thread)
    """

    def __init__(self, ttl_seconds: int, factory: Callable[[str | None], QuerySession]):
        self.ttl_seconds = ttl_seconds
        self.factory = factory
        self._lock = threading.Lock()
        # session_id -> {"session": QuerySession, "expires_at": float}
        self._items: dict[str, dict[str, object]] = {}

    def _get_unlocked(self, session_id: str):
        now = time.time()
        item = self._items.get(session_id)
        if item is None:
            return None
        if float(item["expires_at"]) <= now:
            del self._items[session_id]
            return None
        item["expires_at"] = now + self.ttl_seconds
        return item["session"]

    def create(self, page_url: str | None = None) -> tuple[str, QuerySession]:
        session_id = uuid.uuid4().hex
        session = self.factory(page_url)
        with self._lock:
            self._items[session_id] = {"session": session, "expires_at": time.time() + self.ttl_seconds}
        return session_id, session

    def get(self, session_id: str):
        with self._lock:
            return self._get_unlocked(str(session_id))

    def get_or_create(self, session_id: str | None, page_url: str | None = None) -> tuple[str, QuerySession]:
        if session_id:
            session = self.get(session_id)
            if session is not None:
                return str(session_id), session
        return self.create(page_url)

    def sweep_expired(self) -> int:
        """
        Delete expired sessions. Returns how many entries were removed.
        """
        now = time.time()
        removed = 0
        with self._lock:
            expired = [k for k, v in self._items.items() if float(v["expires_at"]) <= now]
            for k in expired:
                del self._items[k]
                removed += 1
        return removed

    def __len__(self):
        with self._lock:
            return len(self._items)
