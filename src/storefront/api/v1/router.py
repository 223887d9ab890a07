# src/storefront/api/v1/router.py
from fastapi import APIRouter, Security

from storefront.api.v1 import checkout, history, onboarding, products, storage
from storefront.core.security import get_tenant_id

# Every v1 route needs a valid API key, including catalog-only ones
api_router = APIRouter(prefix="/api/v1", dependencies=[Security(get_tenant_id)])
api_router.include_router(products.router)
api_router.include_router(history.router)
api_router.include_router(checkout.router)
api_router.include_router(onboarding.router)
api_router.include_router(storage.router)
