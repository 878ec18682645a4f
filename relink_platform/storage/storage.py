"""
Storage module for Relink (in-memory implementation).

Responsibilities:
    - Keep string values under string keys
    - Expire keys written with a TTL (session tokens)
    - List keys by prefix in ascending order

Design:
    - This is an in-memory reference implementation of the BaseStorage contract.
    - Expiry is lazy: an expired entry is dropped the next time it is read or listed.
    - A lock keeps single-key operations atomic when the app runs in a threadpool,
      matching the per-key consistency real KV services give.
    - For production, use the PostgreSQL backend (see `db_storage.py`).

LLM Prompt Example:
    "Explain how this in-memory storage can be swapped for a database-backed layer
     without changing the manager or API code, by adhering to the BaseStorage interface."
"""

import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from .base import BaseStorage


class Storage(BaseStorage):
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Initialize an empty store.

        Internal schema:
            self.entries = {
                key: (value, expires_at_or_None)
            }

        Args:
            clock: Monotonic time source in seconds; injectable for TTL tests.
        """
        self.entries: Dict[str, Tuple[str, Optional[float]]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def _alive(self, key: str) -> bool:
        entry = self.entries.get(key)
        if entry is None:
            return False
        _, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self.entries[key]
            return False
        return True

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            if not self._alive(key):
                return None
            return self.entries[key][0]

    def put(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        expires_at = self._clock() + ttl if ttl is not None else None
        with self._lock:
            self.entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self.entries.pop(key, None)

    def list_keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            candidates = [k for k in self.entries if k.startswith(prefix)]
            return sorted(k for k in candidates if self._alive(k))
