# src/storefront/core/security.py
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from storefront.core.config import Settings, get_settings

_API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=True)


async def get_tenant_id(
    api_key: str = Security(_API_KEY_HEADER),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    FastAPI dependency: validates the API key and returns the tenant id.
    Raises HTTP 401 for unknown keys.
    """
    tenant_id = settings.api_keys.get(api_key)
    if tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
            headers={"WWW-Authenticate": "ApiKey"},
        )
    return tenant_id


async def get_namespace(
    tenant_id: str = Security(get_tenant_id),
    settings: Settings = Depends(get_settings),
) -> str:
    """Storage namespace of the calling tenant, e.g. '@thamili:tenant_alice'."""
    return f"{settings.storage_namespace}:{tenant_id}"
