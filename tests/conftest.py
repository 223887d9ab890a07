# tests/conftest.py
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

import storefront.api.dependencies as _deps
from storefront.core.config import Settings, get_settings
from storefront.main import app, limiter
from storefront.repositories.memory_storage import InMemoryKeyValueStore
from storefront.services.safe_storage import SafeStorage


class TickingClock:
    """Deterministic millisecond clock: every call advances by `step`."""

    def __init__(self, start: int = 0, step: int = 1) -> None:
        self.now = start
        self._step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self._step
        return value


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(start=1_700_000_000_000)


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def safe_storage(memory_store: InMemoryKeyValueStore) -> SafeStorage:
    return SafeStorage(memory_store)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        api_keys={"test-key-alice": "tenant_alice", "test-key-bob": "tenant_bob"},
        storage_backend="memory",
        autosave_delay_seconds=0.05,
    )


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    # Every test starts with an empty store, catalog and no pending autosaves
    _deps._store = None
    _deps._autosavers.clear()
    _deps.get_product_repository.cache_clear()
    limiter.reset()
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_settings, None)
        _deps._store = None
        _deps._autosavers.clear()
        _deps.get_product_repository.cache_clear()


@pytest.fixture
def alice_headers() -> dict:
    return {"X-API-Key": "test-key-alice"}


@pytest.fixture
def bob_headers() -> dict:
    return {"X-API-Key": "test-key-bob"}
