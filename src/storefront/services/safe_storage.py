from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from storefront.core.metrics import STORAGE_ERRORS
from storefront.domain.ports import KeyValueStorePort

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StorageResult(Generic[T]):
    """Outcome of one storage call. Failed results carry the error instead of raising."""

    ok: bool
    value: T | None = None
    error: Exception | None = None

    def unwrap_or(self, default: T) -> T:
        if not self.ok or self.value is None:
            return default
        return self.value


class SafeStorage:
    """
    Wraps a KeyValueStorePort so that no storage failure reaches the caller.
    Every call returns a StorageResult; callers fold failed results into
    their own empty defaults.
    """

    def __init__(self, store: KeyValueStorePort) -> None:
        self._store = store

    async def _run(self, operation: str, key: str | None, call: Awaitable[T]) -> StorageResult[T]:
        try:
            return StorageResult(ok=True, value=await call)
        except Exception as exc:
            STORAGE_ERRORS.labels(operation=operation).inc()
            logger.exception("Storage %s failed for key %s", operation, key)
            return StorageResult(ok=False, error=exc)

    async def get(self, key: str) -> StorageResult[str]:
        return await self._run("get", key, self._store.get_item(key))

    async def set(self, key: str, value: str) -> StorageResult[None]:
        return await self._run("set", key, self._store.set_item(key, value))

    async def remove(self, key: str) -> StorageResult[None]:
        return await self._run("remove", key, self._store.remove_item(key))

    async def remove_many(self, keys: Sequence[str]) -> StorageResult[None]:
        return await self._run("multi_remove", None, self._store.multi_remove(keys))

    async def keys(self) -> StorageResult[list[str]]:
        return await self._run("get_all_keys", None, self._store.get_all_keys())

    async def get_json(self, key: str) -> StorageResult[Any]:
        """Reads and decodes a JSON document. A missing key is ok with value None."""
        raw = await self.get(key)
        if not raw.ok or raw.value is None:
            return raw
        try:
            return StorageResult(ok=True, value=json.loads(raw.value))
        except ValueError as exc:
            STORAGE_ERRORS.labels(operation="decode").inc()
            logger.warning("Discarding malformed JSON stored under %s: %s", key, exc)
            return StorageResult(ok=False, error=exc)

    async def set_json(self, key: str, document: Any) -> StorageResult[None]:
        return await self.set(key, json.dumps(document, separators=(",", ":")))
