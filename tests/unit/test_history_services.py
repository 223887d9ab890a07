import json

import pytest

from storefront.repositories.memory_storage import InMemoryKeyValueStore
from storefront.services.recently_viewed import RecentlyViewedService
from storefront.services.safe_storage import SafeStorage
from storefront.services.search_history import SearchHistoryService

NAMESPACE = "@thamili"


@pytest.mark.asyncio  # type: ignore[misc]
async def test_recently_viewed_uses_stable_key(
    memory_store: InMemoryKeyValueStore, safe_storage: SafeStorage, clock
) -> None:
    service = RecentlyViewedService(safe_storage, NAMESPACE, clock=clock)

    await service.add("prod-1", "fresh")

    assert await memory_store.get_all_keys() == ["@thamili:recently_viewed"]
    stored = json.loads(await memory_store.get_item("@thamili:recently_viewed"))
    assert stored[0]["key"] == "prod-1"
    assert stored[0]["tag"] == "fresh"


@pytest.mark.asyncio  # type: ignore[misc]
async def test_recently_viewed_default_capacity_is_twenty(
    safe_storage: SafeStorage, clock
) -> None:
    service = RecentlyViewedService(safe_storage, NAMESPACE, clock=clock)

    for i in range(25):
        await service.add(f"prod-{i}")

    assert len(await service.list()) == 20


@pytest.mark.asyncio  # type: ignore[misc]
async def test_recently_viewed_categories_most_recent_first(
    safe_storage: SafeStorage, clock
) -> None:
    service = RecentlyViewedService(safe_storage, NAMESPACE, clock=clock)
    await service.add("a", "frozen")
    await service.add("b")
    await service.add("c", "fresh")
    await service.add("d", "frozen")

    assert await service.categories() == ["frozen", "fresh"]


@pytest.mark.asyncio  # type: ignore[misc]
async def test_recently_viewed_remove_and_clear(safe_storage: SafeStorage, clock) -> None:
    service = RecentlyViewedService(safe_storage, NAMESPACE, clock=clock)
    await service.add("a")
    await service.add("b")

    await service.remove("a")
    assert [e.key for e in await service.list()] == ["b"]

    await service.clear()
    assert await service.list() == []


@pytest.mark.asyncio  # type: ignore[misc]
async def test_recently_viewed_ignores_blank_product_ids(
    memory_store: InMemoryKeyValueStore, safe_storage: SafeStorage, clock
) -> None:
    service = RecentlyViewedService(safe_storage, NAMESPACE, clock=clock)

    await service.add("")
    await service.add("  ", "fresh")

    assert await service.list() == []
    assert await memory_store.get_item("@thamili:recently_viewed") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_search_history_default_capacity_is_ten(safe_storage: SafeStorage, clock) -> None:
    service = SearchHistoryService(safe_storage, NAMESPACE, clock=clock)

    for i in range(15):
        await service.add(f"query {i}")

    entries = await service.list()
    assert len(entries) == 10
    assert entries[0].key == "query 14"


@pytest.mark.asyncio  # type: ignore[misc]
async def test_search_history_dedup_is_case_insensitive(
    safe_storage: SafeStorage, clock
) -> None:
    service = SearchHistoryService(safe_storage, NAMESPACE, clock=clock)

    await service.add("Mango")
    await service.add("rice")
    await service.add("  mango ")

    assert [e.key for e in await service.list()] == ["mango", "rice"]


@pytest.mark.asyncio  # type: ignore[misc]
async def test_search_history_ignores_blank_queries(
    memory_store: InMemoryKeyValueStore, safe_storage: SafeStorage, clock
) -> None:
    service = SearchHistoryService(safe_storage, NAMESPACE, clock=clock)

    await service.add("   ")

    assert await service.list() == []
    assert await memory_store.get_item("@thamili:search_history") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_search_history_remove_matches_any_case(safe_storage: SafeStorage, clock) -> None:
    service = SearchHistoryService(safe_storage, NAMESPACE, clock=clock)
    await service.add("Basmati Rice")

    await service.remove("basmati rice")

    assert await service.list() == []


@pytest.mark.asyncio  # type: ignore[misc]
async def test_search_suggestions(safe_storage: SafeStorage, clock) -> None:
    service = SearchHistoryService(safe_storage, NAMESPACE, clock=clock)
    for query in ("Rice flour", "mango", "Basmati rice", "frozen fish", "rice noodles"):
        await service.add(query)

    assert await service.suggestions("RICE") == ["rice noodles", "Basmati rice", "Rice flour"]
    assert await service.suggestions("rice", limit=1) == ["rice noodles"]
    assert await service.suggestions("rice", limit=0) == []
    assert await service.suggestions("rice", limit=-3) == []
    assert await service.suggestions("chocolate") == []


@pytest.mark.asyncio  # type: ignore[misc]
async def test_search_suggestions_on_corrupt_history(
    memory_store: InMemoryKeyValueStore, safe_storage: SafeStorage, clock
) -> None:
    await memory_store.set_item("@thamili:search_history", "not-json")
    service = SearchHistoryService(safe_storage, NAMESPACE, clock=clock)

    assert await service.suggestions("a") == []
