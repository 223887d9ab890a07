from unittest.mock import AsyncMock

import pytest

from storefront.domain.ports import KeyValueStorePort, StorageError
from storefront.repositories.memory_storage import InMemoryKeyValueStore
from storefront.services.safe_storage import SafeStorage, StorageResult


@pytest.fixture  # type: ignore[misc]
def broken_store() -> AsyncMock:
    store = AsyncMock(spec=KeyValueStorePort)
    error = StorageError("io", None, "device is gone")
    store.get_item.side_effect = error
    store.set_item.side_effect = error
    store.remove_item.side_effect = error
    store.multi_remove.side_effect = error
    store.get_all_keys.side_effect = error
    return store


@pytest.mark.asyncio  # type: ignore[misc]
async def test_successful_calls_return_ok_results(memory_store: InMemoryKeyValueStore) -> None:
    storage = SafeStorage(memory_store)

    assert (await storage.set("k", "v")).ok
    result = await storage.get("k")
    assert result == StorageResult(ok=True, value="v")
    assert (await storage.keys()).value == ["k"]
    assert (await storage.get("missing")).ok
    assert (await storage.get("missing")).value is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_failures_become_failed_results(
    broken_store: AsyncMock, caplog: pytest.LogCaptureFixture
) -> None:
    storage = SafeStorage(broken_store)

    for result in (
        await storage.get("k"),
        await storage.set("k", "v"),
        await storage.remove("k"),
        await storage.remove_many(["a", "b"]),
        await storage.keys(),
    ):
        assert not result.ok
        assert isinstance(result.error, StorageError)

    assert "Storage get failed for key k" in caplog.text
    assert "device is gone" in caplog.text


@pytest.mark.asyncio  # type: ignore[misc]
async def test_json_round_trip_and_decode_failure(memory_store: InMemoryKeyValueStore) -> None:
    storage = SafeStorage(memory_store)

    await storage.set_json("doc", {"a": [1, 2]})
    assert (await storage.get_json("doc")).value == {"a": [1, 2]}

    await memory_store.set_item("doc", "nope{")
    decoded = await storage.get_json("doc")
    assert not decoded.ok
    assert decoded.unwrap_or({}) == {}


def test_unwrap_or() -> None:
    assert StorageResult(ok=True, value="x").unwrap_or("d") == "x"
    assert StorageResult(ok=True, value=None).unwrap_or("d") == "d"
    assert StorageResult[str](ok=False, error=RuntimeError()).unwrap_or("d") == "d"
