from pathlib import Path

import pytest
import pytest_asyncio

from storefront.repositories.sqlite_storage import SQLiteKeyValueStore


@pytest_asyncio.fixture  # type: ignore[misc]
async def sqlite_store() -> SQLiteKeyValueStore:
    # Use in-memory SQLite for testing
    store = SQLiteKeyValueStore("sqlite+aiosqlite:///:memory:")
    await store.initialize()
    return store


@pytest.mark.asyncio  # type: ignore[misc]
async def test_set_and_get(sqlite_store: SQLiteKeyValueStore) -> None:
    await sqlite_store.set_item("@thamili:search_history", '[{"key":"rice","timestamp":1}]')

    value = await sqlite_store.get_item("@thamili:search_history")
    assert value == '[{"key":"rice","timestamp":1}]'


@pytest.mark.asyncio  # type: ignore[misc]
async def test_get_missing_key(sqlite_store: SQLiteKeyValueStore) -> None:
    assert await sqlite_store.get_item("nope") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_set_overwrites_existing_value(sqlite_store: SQLiteKeyValueStore) -> None:
    await sqlite_store.set_item("k", "first")
    await sqlite_store.set_item("k", "second")

    assert await sqlite_store.get_item("k") == "second"
    assert await sqlite_store.get_all_keys() == ["k"]


@pytest.mark.asyncio  # type: ignore[misc]
async def test_remove_item(sqlite_store: SQLiteKeyValueStore) -> None:
    await sqlite_store.set_item("k", "v")

    await sqlite_store.remove_item("k")
    await sqlite_store.remove_item("k")

    assert await sqlite_store.get_item("k") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_multi_remove_and_get_all_keys(sqlite_store: SQLiteKeyValueStore) -> None:
    for key in ("b", "a", "c"):
        await sqlite_store.set_item(key, key.upper())

    assert await sqlite_store.get_all_keys() == ["a", "b", "c"]

    await sqlite_store.multi_remove(["a", "c", "missing"])
    await sqlite_store.multi_remove([])

    assert await sqlite_store.get_all_keys() == ["b"]


@pytest.mark.asyncio  # type: ignore[misc]
async def test_data_survives_a_new_store_instance(tmp_path: Path) -> None:
    url = f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}"
    first = SQLiteKeyValueStore(url)
    await first.initialize()
    await first.set_item("@thamili:checkout_data", '{"payment_method":"cod"}')
    await first.dispose()

    second = SQLiteKeyValueStore(url)
    await second.initialize()
    try:
        assert await second.get_item("@thamili:checkout_data") == '{"payment_method":"cod"}'
    finally:
        await second.dispose()
