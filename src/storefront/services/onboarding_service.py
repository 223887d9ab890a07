from __future__ import annotations

from storefront.domain.models import OnboardingStatus, StoragePurpose, storage_key
from storefront.services.safe_storage import SafeStorage

_TRUE = "true"


class OnboardingService:
    def __init__(self, storage: SafeStorage, namespace: str) -> None:
        self._storage = storage
        self._onboarding_key = storage_key(namespace, StoragePurpose.ONBOARDING_COMPLETED)
        self._tutorial_key = storage_key(namespace, StoragePurpose.TUTORIAL_COMPLETED)

    async def status(self) -> OnboardingStatus:
        onboarding = await self._storage.get(self._onboarding_key)
        tutorial = await self._storage.get(self._tutorial_key)
        return OnboardingStatus(
            onboarding_completed=onboarding.unwrap_or("") == _TRUE,
            tutorial_completed=tutorial.unwrap_or("") == _TRUE,
        )

    async def complete_onboarding(self) -> None:
        await self._storage.set(self._onboarding_key, _TRUE)

    async def complete_tutorial(self) -> None:
        await self._storage.set(self._tutorial_key, _TRUE)

    async def reset(self) -> None:
        await self._storage.remove_many([self._onboarding_key, self._tutorial_key])
