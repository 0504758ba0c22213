"""Record store selection and lifecycle."""

from __future__ import annotations

from skillswap.config import Settings
from skillswap.store.base import Collection, RecordStore
from skillswap.store.json_store import JsonRecordStore
from skillswap.store.sql_store import SqlRecordStore

_store: RecordStore | None = None


async def init_store(settings: Settings) -> RecordStore:
    """Create the configured backend and make it the process-wide store."""
    global _store  # noqa: PLW0603
    if settings.store_backend == "sql":
        _store = await SqlRecordStore.connect(
            settings.database_url,
            create_schema=settings.database_auto_create,
        )
    else:
        _store = JsonRecordStore(settings.data_dir)
    return _store


async def close_store() -> None:
    """Release the store's resources."""
    global _store  # noqa: PLW0603
    if _store is not None:
        await _store.close()
        _store = None


def get_store() -> RecordStore:
    """Get the record store (FastAPI dependency)."""
    if _store is None:
        msg = "Record store not initialized. Call init_store() first."
        raise RuntimeError(msg)
    return _store


__all__ = [
    "Collection",
    "RecordStore",
    "close_store",
    "get_store",
    "init_store",
]
