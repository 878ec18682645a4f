"""
Storage factory – switch storage backend from config (lazy env version)
======================================================================

This module centralizes selection of the storage backend (in-memory vs DB)
so the rest of the app can stay ignorant of where data lives.

- Reads environment **at call time** to avoid stale values in tests.
- Imports the DB backend **only if** the selected backend is "postgres".

Environment variables
---------------------
- RELINK_STORAGE_BACKEND: "memory" (default) or "postgres"
- RELINK_DB_DSN:          DSN string if backend=="postgres"
"""

import logging
import os
from typing import Optional

from relink_platform.storage.base import BaseStorage
from relink_platform.storage.storage import Storage

log = logging.getLogger(__name__)


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a storage backend based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" (default) or "postgres". If omitted, reads RELINK_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend. For postgres, use dsn="..." and
        optionally ensure_schema=True.

    Returns
    -------
    BaseStorage
    """
    be = (backend or os.getenv("RELINK_STORAGE_BACKEND", "memory")).strip().lower()
    log.debug("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "postgres":
        dsn = kwargs.get("dsn") or os.getenv("RELINK_DB_DSN", "")
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env RELINK_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from relink_platform.storage.db_storage import DBStorage

        storage = DBStorage(dsn=dsn)
        if kwargs.get("ensure_schema"):
            storage.ensure_schema()
        return storage

    raise ValueError(f"Unknown storage backend: {be!r}")
