from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from storefront.core.metrics import HISTORY_APPENDS
from storefront.domain.models import HistoryEntry
from storefront.services.safe_storage import SafeStorage

logger = logging.getLogger(__name__)


def epoch_millis() -> int:
    return int(time.time() * 1000)


def _identity(key: str) -> str:
    return key


class HistoryJournal:
    """
    Bounded, deduplicating, most-recent-first list of HistoryEntry objects
    persisted as one JSON array under a single storage key.

    Appending a key that is already present replaces the old entry, so a key
    occurs at most once. Once the journal holds `capacity` entries the oldest
    one is dropped. Storage problems never propagate: reads fall back to an
    empty journal and failed writes are logged and dropped.

    There is no locking. Two concurrent read-modify-write calls on the same
    key may lose one of the updates (last writer wins).
    """

    def __init__(
        self,
        storage: SafeStorage,
        storage_key: str,
        capacity: int,
        *,
        name: str = "history",
        clock: Callable[[], int] = epoch_millis,
        normalize: Callable[[str], str] = _identity,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"Journal capacity must be at least 1, got {capacity}")
        self._storage = storage
        self._key = storage_key
        self._capacity = capacity
        self._name = name
        self._clock = clock
        self._normalize = normalize

    @property
    def storage_key(self) -> str:
        return self._key

    @property
    def capacity(self) -> int:
        return self._capacity

    async def append(self, key: str, tag: str | None = None) -> None:
        """Records `key` as the most recent entry. Blank keys are ignored."""
        if not key.strip():
            logger.debug("Ignoring blank %s key", self._name)
            return
        entries = await self.list()
        wanted = self._normalize(key)
        kept = [e for e in entries if self._normalize(e.key) != wanted]
        new_entry = HistoryEntry(key=key, timestamp=self._clock(), tag=tag)
        updated = [new_entry, *kept][: self._capacity]
        if await self._write(updated):
            HISTORY_APPENDS.labels(journal=self._name).inc()

    async def list(self) -> list[HistoryEntry]:
        result = await self._storage.get_json(self._key)
        if not result.ok or result.value is None:
            return []
        entries = self._decode(result.value)
        # Stored data may have been written by older releases or other tools
        return sorted(entries, key=lambda e: e.timestamp, reverse=True)

    async def remove(self, key: str) -> None:
        wanted = self._normalize(key)
        entries = await self.list()
        await self._write([e for e in entries if self._normalize(e.key) != wanted])

    async def clear(self) -> None:
        await self._storage.remove(self._key)

    def _decode(self, payload: Any) -> list[HistoryEntry]:
        if not isinstance(payload, list):
            logger.warning("Ignoring %s journal: expected a JSON array", self._name)
            return []
        entries: list[HistoryEntry] = []
        for item in payload:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError:
                logger.warning("Dropping malformed %s entry: %r", self._name, item)
        return entries

    async def _write(self, entries: list[HistoryEntry]) -> bool:
        result = await self._storage.set_json(
            self._key, [e.model_dump(mode="json") for e in entries]
        )
        return result.ok
