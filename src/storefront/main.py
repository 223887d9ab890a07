# src/storefront/main.py
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from storefront.api.dependencies import get_key_value_store, shutdown_storage
from storefront.api.v1.router import api_router
from storefront.core.config import Settings, get_settings
from storefront.core.metrics import REQUEST_COUNT
from storefront.domain.ports import KeyValueStorePort, StorageError

logger = logging.getLogger(__name__)

settings = get_settings()


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        REQUEST_COUNT.labels(
            method=request.method,
            path=request.url.path,
            status_code=str(response.status_code),
        ).inc()
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s with %s storage", settings.app_name, settings.storage_backend)
    yield
    # Shutdown: write pending checkout drafts before the store goes away
    await shutdown_storage()


def _client_key(request: Request) -> str:
    # Per API key; peer address for requests without one
    return request.headers.get("X-API-Key") or get_remote_address(request)


def _rate_limit() -> str:
    return get_settings().rate_limit


limiter = Limiter(key_func=_client_key, default_limits=[_rate_limit])

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=(
        "Per-tenant recently viewed products, search history, recommendations "
        "and debounced checkout draft autosave for the storefront client."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Rate Limiting: default limit on every route not marked exempt
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_middleware(SlowAPIMiddleware)

# Metrics Middleware
app.add_middleware(MetricsMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["X-API-Key", "Content-Type"],
)

app.include_router(api_router)


@app.get("/healthz", tags=["Health"])
@limiter.exempt
async def health_check() -> dict[str, str]:
    return {"status": "ok", "version": settings.app_version}


@app.get("/readyz", tags=["Health"])
@limiter.exempt
async def readiness_check(
    store: Annotated[KeyValueStorePort, Depends(get_key_value_store)],
    current: Annotated[Settings, Depends(get_settings)],
) -> dict[str, str]:
    try:
        await store.get_all_keys()
    except StorageError as exc:
        logger.warning("Readiness check failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Key-value storage unavailable",
        ) from exc
    return {"status": "ready", "storage": current.storage_backend}


@app.get("/metrics", tags=["Monitoring"])
@limiter.exempt
async def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
