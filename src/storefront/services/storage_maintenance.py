from __future__ import annotations

import logging
from collections.abc import Iterable

from storefront.domain.models import StorageUsage, storage_key
from storefront.services.safe_storage import SafeStorage

logger = logging.getLogger(__name__)

DEFAULT_PROTECTED_SUFFIXES = ("user_data", "cart", "country")


class StorageMaintenanceService:
    """Cache inspection for one namespace: how much is stored, and wiping it."""

    def __init__(
        self,
        storage: SafeStorage,
        namespace: str,
        protected_suffixes: Iterable[str] = DEFAULT_PROTECTED_SUFFIXES,
    ) -> None:
        self._storage = storage
        self._prefix = f"{namespace}:"
        self._protected = {storage_key(namespace, s) for s in protected_suffixes}

    async def _namespace_keys(self) -> list[str] | None:
        result = await self._storage.keys()
        if not result.ok:
            return None
        return [k for k in result.unwrap_or([]) if k.startswith(self._prefix)]

    async def usage(self) -> StorageUsage:
        keys = await self._namespace_keys()
        if keys is None:
            return StorageUsage()
        total = 0
        for key in keys:
            value = (await self._storage.get(key)).unwrap_or("")
            total += len(value.encode("utf-8"))
        return StorageUsage(key_count=len(keys), total_bytes=total)

    async def clear_cache(self) -> list[str]:
        """Removes every key of the namespace except the protected ones."""
        keys = await self._namespace_keys()
        if not keys:
            return []
        doomed = [k for k in keys if k not in self._protected]
        if not doomed:
            return []
        result = await self._storage.remove_many(doomed)
        if not result.ok:
            return []
        logger.info("Cleared %d cached key(s) under %s", len(doomed), self._prefix)
        return doomed
