from __future__ import annotations

from collections.abc import Callable

from storefront.domain.models import HistoryEntry, StoragePurpose, storage_key
from storefront.services.history_journal import HistoryJournal, epoch_millis
from storefront.services.safe_storage import SafeStorage

DEFAULT_CAPACITY = 20


class RecentlyViewedService:
    def __init__(
        self,
        storage: SafeStorage,
        namespace: str,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._journal = HistoryJournal(
            storage,
            storage_key(namespace, StoragePurpose.RECENTLY_VIEWED),
            capacity,
            name="recently_viewed",
            clock=clock,
        )

    @property
    def journal(self) -> HistoryJournal:
        return self._journal

    async def add(self, product_id: str, category: str | None = None) -> None:
        await self._journal.append(product_id, category)

    async def list(self) -> list[HistoryEntry]:
        return await self._journal.list()

    async def remove(self, product_id: str) -> None:
        await self._journal.remove(product_id)

    async def clear(self) -> None:
        await self._journal.clear()

    async def categories(self) -> list[str]:
        """Distinct categories of viewed products, most recently viewed first."""
        seen: dict[str, None] = {}
        for entry in await self._journal.list():
            if entry.tag:
                seen.setdefault(entry.tag, None)
        return list(seen)
