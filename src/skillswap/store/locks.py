"""In-process locks keyed by name.

Services hold one of these across a read-check-write sequence that must not
interleave with the same sequence from another request, e.g. "feedback not yet
given" followed by writing the feedback. Locks only exist while someone holds
or awaits them.
"""

from __future__ import annotations

import asyncio
import weakref

_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()


def keyed_lock(key: str) -> asyncio.Lock:
    """Return the lock for ``key``, creating it if nobody holds one."""
    lock = _locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _locks[key] = lock
    return lock
