# src/storefront/api/v1/onboarding.py
from typing import Annotated

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_onboarding_service
from storefront.domain.models import OnboardingStatus
from storefront.services.onboarding_service import OnboardingService

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])

ServiceDep = Annotated[OnboardingService, Depends(get_onboarding_service)]


@router.get("/", response_model=OnboardingStatus)
async def get_onboarding_status(service: ServiceDep) -> OnboardingStatus:
    return await service.status()


@router.post("/complete", response_model=OnboardingStatus)
async def complete_onboarding(service: ServiceDep) -> OnboardingStatus:
    await service.complete_onboarding()
    return await service.status()


@router.post("/tutorial/complete", response_model=OnboardingStatus)
async def complete_tutorial(service: ServiceDep) -> OnboardingStatus:
    await service.complete_tutorial()
    return await service.status()


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
async def reset_onboarding(service: ServiceDep) -> None:
    await service.reset()
