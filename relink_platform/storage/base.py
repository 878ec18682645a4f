"""
Base storage interface for Relink.

Purpose:
    Define the flat key-value contract every backend (in-memory, PostgreSQL,
    or any other KV service) implements. Business logic only ever talks to
    these four operations:

        get(key)                  -> value or None
        put(key, value, ttl=None) -> store, optionally expiring after `ttl` seconds
        delete(key)               -> remove (no error when absent)
        list_keys(prefix)         -> keys starting with `prefix`, ascending

    Each operation is atomic for a single key. There are no multi-key
    transactions; callers must tolerate interleaving between their writes.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.

LLM Prompt Example:
    "Show how a narrow key-value interface lets a link registry run on an
    in-memory dict in tests and on PostgreSQL in production."
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class BaseStorage(ABC):
    """Abstract base class for key-value storage backends."""

    @abstractmethod  # pragma: no cover
    def get(self, key: str) -> Optional[str]:
        """
        Return the value stored under `key`, or None when absent or expired.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def put(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """
        Store `value` under `key`, replacing any previous value.

        Args:
            ttl (Optional[int]): Lifetime in seconds; None keeps the key forever.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete(self, key: str) -> None:
        """Remove `key`. Deleting a missing key is not an error."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def list_keys(self, prefix: str = "") -> List[str]:
        """
        Return all live keys starting with `prefix`, sorted ascending.

        The ordering defines the "scan order" used by callers that need a
        deterministic traversal (e.g. merge tie-breaks).
        """
        raise NotImplementedError
