# src/storefront/api/v1/storage.py
from typing import Annotated

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_storage_maintenance_service
from storefront.domain.models import ClearedKeys, StorageUsage
from storefront.services.storage_maintenance import StorageMaintenanceService

router = APIRouter(prefix="/storage", tags=["Storage"])

ServiceDep = Annotated[StorageMaintenanceService, Depends(get_storage_maintenance_service)]


@router.get("/usage", response_model=StorageUsage)
async def get_storage_usage(service: ServiceDep) -> StorageUsage:
    return await service.usage()


@router.delete("/cache", response_model=ClearedKeys)
async def clear_storage_cache(service: ServiceDep) -> ClearedKeys:
    return ClearedKeys(removed=await service.clear_cache())
