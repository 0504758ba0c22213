"""Flat-file JSON backend.

Each collection lives in ``<data_dir>/<name>.json`` as a single JSON array that
is re-read on every operation and rewritten whole on every mutation. Writes
within a process are serialized per file and land via temp-file + rename, so a
reader never sees a half-written file. Separate processes sharing the
directory still race: the last writer wins.
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from skillswap.store.base import Collection, R, RecordStore, record_matches
from skillswap.store.records import MessageRecord, SwapRecord, UserRecord

logger = structlog.get_logger()


class JsonCollection(Collection[R]):
    """A collection backed by one JSON array file."""

    def __init__(self, name: str, record_type: type[R], path: Path) -> None:
        super().__init__(name, record_type)
        self.path = path
        self._lock = asyncio.Lock()

    # -- file I/O ----------------------------------------------------------

    def _read_raw(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        data = json.loads(text)
        if not isinstance(data, list):
            msg = f"{self.path} does not contain a JSON array"
            raise ValueError(msg)
        return data

    def _write_raw(self, items: list[dict[str, Any]]) -> None:
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(items, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)

    async def _load(self) -> list[R]:
        raw = await asyncio.to_thread(self._read_raw)
        return [self.record_type.model_validate(item) for item in raw]

    async def _save(self, records: list[R]) -> None:
        payload = [record.model_dump(mode="json") for record in records]
        await asyncio.to_thread(self._write_raw, payload)

    # -- operations --------------------------------------------------------

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[R]:
        checked = self.check_filters(filters)
        records = await self._load()
        if not checked:
            return records
        return [record for record in records if record_matches(record, checked)]

    async def find_by_id(self, record_id: str) -> R | None:
        for record in await self._load():
            if record.id == record_id:
                return record
        return None

    async def create(self, data: Mapping[str, Any]) -> R:
        async with self._lock:
            records = await self._load()
            record = self.build_new(data)
            records.append(record)
            await self._save(records)
        return record

    async def update(self, record_id: str, patch: Mapping[str, Any]) -> R | None:
        async with self._lock:
            records = await self._load()
            for index, existing in enumerate(records):
                if existing.id == record_id:
                    break
            else:
                return None
            updated = self.merge(existing, patch)
            records[index] = updated
            await self._save(records)
        return updated

    async def delete(self, record_id: str) -> bool:
        async with self._lock:
            records = await self._load()
            remaining = [record for record in records if record.id != record_id]
            if len(remaining) == len(records):
                return False
            await self._save(remaining)
        return True


class JsonRecordStore(RecordStore):
    """Record store that keeps one JSON file per collection in a directory."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.users = JsonCollection("users", UserRecord, self.data_dir / "users.json")
        self.swaps = JsonCollection("swaps", SwapRecord, self.data_dir / "swaps.json")
        self.messages = JsonCollection("messages", MessageRecord, self.data_dir / "messages.json")
        for collection in (self.users, self.swaps, self.messages):
            if not collection.path.exists():
                collection.path.write_text("[]", encoding="utf-8")
        logger.info("json_store_ready", data_dir=str(self.data_dir))

    async def ping(self) -> None:
        if not os.access(self.data_dir, os.W_OK):
            msg = f"Data directory {self.data_dir} is not writable"
            raise RuntimeError(msg)
