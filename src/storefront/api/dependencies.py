# src/storefront/api/dependencies.py
import logging
from functools import lru_cache

from fastapi import Depends, Security

from storefront.core.config import Settings, get_settings
from storefront.core.security import get_namespace
from storefront.domain.models import StoragePurpose, storage_key
from storefront.domain.ports import KeyValueStorePort
from storefront.repositories.memory_storage import InMemoryKeyValueStore
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.sqlite_storage import SQLiteKeyValueStore
from storefront.services.checkout_autosave import CheckoutAutoSave
from storefront.services.onboarding_service import OnboardingService
from storefront.services.recently_viewed import RecentlyViewedService
from storefront.services.recommendations import RecommendationService
from storefront.services.safe_storage import SafeStorage
from storefront.services.search_history import SearchHistoryService
from storefront.services.storage_maintenance import StorageMaintenanceService

logger = logging.getLogger(__name__)

# Singleton key-value store (initialized on first access)
_store: KeyValueStorePort | None = None


async def get_key_value_store(
    settings: Settings = Depends(get_settings),
) -> KeyValueStorePort:
    global _store
    if _store is None:
        if settings.storage_backend == "memory":
            _store = InMemoryKeyValueStore()
        else:
            sqlite_store = SQLiteKeyValueStore(database_url=settings.database_url)
            await sqlite_store.initialize()
            _store = sqlite_store
        logger.info("Using %s key-value storage", settings.storage_backend)
    return _store


def get_safe_storage(
    store: KeyValueStorePort = Depends(get_key_value_store),
) -> SafeStorage:
    return SafeStorage(store)


@lru_cache
def get_product_repository() -> ProductRepository:
    return ProductRepository()


def get_recently_viewed_service(
    storage: SafeStorage = Depends(get_safe_storage),
    namespace: str = Security(get_namespace),
    settings: Settings = Depends(get_settings),
) -> RecentlyViewedService:
    return RecentlyViewedService(storage, namespace, capacity=settings.recently_viewed_capacity)


def get_search_history_service(
    storage: SafeStorage = Depends(get_safe_storage),
    namespace: str = Security(get_namespace),
    settings: Settings = Depends(get_settings),
) -> SearchHistoryService:
    return SearchHistoryService(storage, namespace, capacity=settings.search_history_capacity)


def get_recommendation_service(
    recently_viewed: RecentlyViewedService = Depends(get_recently_viewed_service),
    settings: Settings = Depends(get_settings),
) -> RecommendationService:
    return RecommendationService(recently_viewed, default_market=settings.default_market)


# One autosaver per namespace: its pending timer must survive across requests
_autosavers: dict[str, CheckoutAutoSave] = {}


def get_checkout_autosave(
    storage: SafeStorage = Depends(get_safe_storage),
    namespace: str = Security(get_namespace),
    settings: Settings = Depends(get_settings),
) -> CheckoutAutoSave:
    autosave = _autosavers.get(namespace)
    if autosave is None:
        autosave = CheckoutAutoSave(
            storage,
            storage_key(namespace, StoragePurpose.CHECKOUT_DATA),
            delay_seconds=settings.autosave_delay_seconds,
        )
        _autosavers[namespace] = autosave
    return autosave


def get_onboarding_service(
    storage: SafeStorage = Depends(get_safe_storage),
    namespace: str = Security(get_namespace),
) -> OnboardingService:
    return OnboardingService(storage, namespace)


def get_storage_maintenance_service(
    storage: SafeStorage = Depends(get_safe_storage),
    namespace: str = Security(get_namespace),
    settings: Settings = Depends(get_settings),
) -> StorageMaintenanceService:
    return StorageMaintenanceService(
        storage, namespace, protected_suffixes=settings.protected_storage_suffixes
    )


async def shutdown_storage() -> None:
    """Flushes pending checkout drafts and releases the store."""
    global _store
    for autosave in list(_autosavers.values()):
        await autosave.aclose()
    _autosavers.clear()
    if isinstance(_store, SQLiteKeyValueStore):
        await _store.dispose()
    _store = None
