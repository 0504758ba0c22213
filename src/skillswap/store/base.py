"""Record store interface.

A store exposes one collection per record type. Every collection supports the
same five operations regardless of backend:

- ``find_all(filters)``: every record when ``filters`` is empty; otherwise
  records matching *all* filter keys. A bool value matches by equality, a
  string value by case-insensitive substring, anything else by equality.
- ``find_by_id(id)``
- ``create(data)``: fresh id and server-controlled defaults win over ``data``.
- ``update(id, patch)``: merge, refresh ``updated_at``, ``None`` if missing.
- ``delete(id)``: ``True`` if a record was removed.
"""

from __future__ import annotations

import enum
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Generic, TypeVar

from skillswap.store.records import (
    MessageRecord,
    Rating,
    Record,
    SwapRecord,
    SwapStatus,
    UserRecord,
    utcnow,
)

R = TypeVar("R", bound=Record)

_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})

_SERVER_DEFAULTS: dict[type[Record], Callable[[datetime], dict[str, Any]]] = {
    UserRecord: lambda now: {
        "rating": Rating(),
        "is_admin": False,
        "is_banned": False,
        "ban_reason": "",
        "last_active": now,
    },
    SwapRecord: lambda now: {
        "status": SwapStatus.PENDING,
        "requester_feedback": None,
        "provider_feedback": None,
        "admin_notes": "",
        "is_reported": False,
        "report_reason": "",
    },
    MessageRecord: lambda now: {
        "is_active": True,
        "read_by": [],
    },
}


def new_id() -> str:
    """Generate a record id."""
    return uuid.uuid4().hex


def normalize_filter_value(value: Any) -> Any:  # noqa: ANN401
    """Unwrap enum members so both backends compare raw values."""
    if isinstance(value, enum.Enum):
        return value.value
    return value


def field_matches(actual: Any, expected: Any) -> bool:  # noqa: ANN401
    """Apply the filter rule for a single field."""
    actual = normalize_filter_value(actual)
    expected = normalize_filter_value(expected)
    if isinstance(expected, bool):
        return isinstance(actual, bool) and actual is expected
    if isinstance(expected, str):
        if actual is None:
            return False
        return expected.lower() in str(actual).lower()
    return actual == expected


def record_matches(record: Record, filters: Mapping[str, Any]) -> bool:
    """True if the record satisfies every filter key."""
    return all(field_matches(getattr(record, key), value) for key, value in filters.items())


class Collection(ABC, Generic[R]):
    """One named collection of records of a single type."""

    def __init__(self, name: str, record_type: type[R]) -> None:
        self.name = name
        self.record_type = record_type

    @abstractmethod
    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[R]:
        """Return records matching every filter key, oldest first."""

    @abstractmethod
    async def find_by_id(self, record_id: str) -> R | None:
        """Return the record with this id, if any."""

    @abstractmethod
    async def create(self, data: Mapping[str, Any]) -> R:
        """Validate and persist a new record."""

    @abstractmethod
    async def update(self, record_id: str, patch: Mapping[str, Any]) -> R | None:
        """Merge ``patch`` into an existing record. Returns None if it does not exist."""

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Remove a record. Returns True if one was removed."""

    def check_filters(self, filters: Mapping[str, Any] | None) -> dict[str, Any]:
        """Validate filter keys against the record type.

        Raises:
            ValueError: If a key is not a filterable field of this collection.
        """
        filters = dict(filters or {})
        unknown = set(filters) - self.record_type.filterable_fields
        if unknown:
            msg = f"Cannot filter {self.name} on: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        return filters

    def build_new(self, data: Mapping[str, Any]) -> R:
        """Build a validated new record, applying server-controlled fields."""
        now = utcnow()
        defaults = _SERVER_DEFAULTS.get(self.record_type, lambda _now: {})(now)
        values = {
            **data,
            **defaults,
            "id": new_id(),
            "created_at": now,
            "updated_at": now,
        }
        return self.record_type.model_validate(values)

    def merge(self, existing: R, patch: Mapping[str, Any]) -> R:
        """Apply a patch over an existing record and refresh ``updated_at``."""
        values = existing.model_dump()
        values.update({k: v for k, v in patch.items() if k not in _IMMUTABLE_FIELDS})
        values["updated_at"] = utcnow()
        return self.record_type.model_validate(values)


class RecordStore(ABC):
    """The set of collections the application persists."""

    users: Collection[UserRecord]
    swaps: Collection[SwapRecord]
    messages: Collection[MessageRecord]

    @abstractmethod
    async def ping(self) -> None:
        """Raise if the backend is unusable."""

    async def close(self) -> None:
        """Release backend resources."""
        return None
