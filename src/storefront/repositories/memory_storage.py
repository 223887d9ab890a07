# src/storefront/repositories/memory_storage.py
from __future__ import annotations

from collections.abc import Sequence

from storefront.domain.ports import KeyValueStorePort


class InMemoryKeyValueStore(KeyValueStorePort):
    """
    Dict-backed store for tests and single-process setups.
    Data lives as long as the process; swap for SQLiteKeyValueStore to persist.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    async def multi_remove(self, keys: Sequence[str]) -> None:
        for key in keys:
            self._items.pop(key, None)

    async def get_all_keys(self) -> list[str]:
        return list(self._items)
