"""Shared FastAPI dependencies."""

from skillswap.store import RecordStore, get_store


async def get_record_store() -> RecordStore:
    """Return the process-wide record store as a FastAPI dependency."""
    return get_store()
