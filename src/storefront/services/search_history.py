from __future__ import annotations

import logging
from collections.abc import Callable

from storefront.domain.models import HistoryEntry, StoragePurpose, storage_key
from storefront.services.history_journal import HistoryJournal, epoch_millis
from storefront.services.safe_storage import SafeStorage

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10


def normalize_query(query: str) -> str:
    return query.strip().lower()


class SearchHistoryService:
    """
    Recent searches. Queries are stored trimmed but compared case-insensitively,
    so "Mango" and " mango " count as the same search.
    """

    def __init__(
        self,
        storage: SafeStorage,
        namespace: str,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._journal = HistoryJournal(
            storage,
            storage_key(namespace, StoragePurpose.SEARCH_HISTORY),
            capacity,
            name="search_history",
            clock=clock,
            normalize=normalize_query,
        )

    @property
    def journal(self) -> HistoryJournal:
        return self._journal

    async def add(self, query: str, category: str | None = None) -> None:
        trimmed = query.strip()
        if not trimmed:
            logger.debug("Ignoring blank search query")
            return
        await self._journal.append(trimmed, category)

    async def list(self) -> list[HistoryEntry]:
        return await self._journal.list()

    async def remove(self, query: str) -> None:
        await self._journal.remove(query)

    async def clear(self) -> None:
        await self._journal.clear()

    async def suggestions(self, query: str, limit: int = 5) -> list[str]:
        """Past queries containing `query`, most recent first."""
        needle = query.lower()
        matches = [e.key for e in await self._journal.list() if needle in e.key.lower()]
        return matches[: max(limit, 0)]
