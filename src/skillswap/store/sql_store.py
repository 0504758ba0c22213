"""SQLAlchemy backend.

Every operation opens its own session and commits before returning, so each
create/update/delete is atomic on its own row. There are no multi-record
transactions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy import JSON, DateTime, delete, func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from skillswap.database import close_db, get_engine, get_session_factory, init_db
from skillswap.db.base import Base
from skillswap.db.models import PlatformMessage, Swap, User
from skillswap.errors import ConflictError
from skillswap.store.base import Collection, R, RecordStore, normalize_filter_value
from skillswap.store.records import MessageRecord, SwapRecord, UserRecord

logger = structlog.get_logger()


class SqlCollection(Collection[R]):
    """A collection mapped onto one ORM model."""

    def __init__(
        self,
        name: str,
        record_type: type[R],
        model: type[Base],
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        super().__init__(name, record_type)
        self.model = model
        self._session_factory = session_factory
        self._columns = list(model.__table__.columns)

    def _to_record(self, row: Base) -> R:
        return self.record_type.model_validate(row)

    def _row_values(self, record: R) -> dict[str, Any]:
        """Column values for a record: datetimes stay native, the rest JSON-ready."""
        native = record.model_dump()
        json_ready = record.model_dump(mode="json")
        return {
            column.key: native[column.key] if isinstance(column.type, DateTime) else json_ready[column.key]
            for column in self._columns
        }

    def _condition(self, key: str, expected: Any) -> Any:  # noqa: ANN401
        column = getattr(self.model, key)
        if isinstance(column.type, JSON):
            msg = f"Cannot filter {self.name} on document field '{key}'"
            raise ValueError(msg)
        expected = normalize_filter_value(expected)
        if isinstance(expected, bool):
            return column.is_(expected)
        if isinstance(expected, str):
            return func.lower(column).contains(expected.lower(), autoescape=True)
        return column == expected

    async def _commit(self, session: AsyncSession) -> None:
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            msg = f"{self.name} record violates a uniqueness constraint"
            raise ConflictError(msg) from e

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[R]:
        checked = self.check_filters(filters)
        stmt = select(self.model).order_by(self.model.created_at)
        for key, expected in checked.items():
            stmt = stmt.where(self._condition(key, expected))
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_record(row) for row in result.scalars().all()]

    async def find_by_id(self, record_id: str) -> R | None:
        async with self._session_factory() as session:
            row = await session.get(self.model, record_id)
            return self._to_record(row) if row is not None else None

    async def create(self, data: Mapping[str, Any]) -> R:
        record = self.build_new(data)
        async with self._session_factory() as session:
            session.add(self.model(**self._row_values(record)))
            await self._commit(session)
        return record

    async def update(self, record_id: str, patch: Mapping[str, Any]) -> R | None:
        async with self._session_factory() as session:
            row = await session.get(self.model, record_id)
            if row is None:
                return None
            record = self.merge(self._to_record(row), patch)
            # Only patched columns are written; others keep what concurrent writers stored.
            for key, value in self._row_values(record).items():
                if key in patch or key == "updated_at":
                    setattr(row, key, value)
            await self._commit(session)
        return record

    async def delete(self, record_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(delete(self.model).where(self.model.id == record_id))
            await session.commit()
        return bool(result.rowcount)


class SqlRecordStore(RecordStore):
    """Record store on top of the shared async SQLAlchemy engine."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.users = SqlCollection("users", UserRecord, User, session_factory)
        self.swaps = SqlCollection("swaps", SwapRecord, Swap, session_factory)
        self.messages = SqlCollection("messages", MessageRecord, PlatformMessage, session_factory)

    @classmethod
    async def connect(cls, url: str, *, create_schema: bool = False) -> SqlRecordStore:
        """Initialize the engine and optionally create missing tables."""
        await init_db(url)
        if create_schema:
            async with get_engine().begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("sql_store_ready", backend=get_engine().dialect.name, create_schema=create_schema)
        return cls(get_session_factory())

    async def ping(self) -> None:
        async with get_engine().connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            result.scalar()

    async def close(self) -> None:
        await close_db()
