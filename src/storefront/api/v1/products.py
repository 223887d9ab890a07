# src/storefront/api/v1/products.py
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from storefront.api.dependencies import (
    get_product_repository,
    get_recently_viewed_service,
    get_recommendation_service,
    get_search_history_service,
)
from storefront.domain.models import Market, Product, ProductCreate
from storefront.repositories.product_repository import ProductRepository
from storefront.services.recently_viewed import RecentlyViewedService
from storefront.services.recommendations import RecommendationService
from storefront.services.search_history import SearchHistoryService

router = APIRouter(prefix="/products", tags=["Products"])

RepoDep = Annotated[ProductRepository, Depends(get_product_repository)]
RecommendationDep = Annotated[RecommendationService, Depends(get_recommendation_service)]
LimitQuery = Annotated[int, Query(ge=0, le=100)]


def _get_or_404(repo: ProductRepository, product_id: str) -> Product:
    product = repo.find_by_id(product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product '{product_id}' not found.",
        )
    return product


@router.post("/", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, repo: RepoDep) -> Product:
    return repo.save(Product(**payload.model_dump()))


@router.get("/", response_model=list[Product])
async def list_products(repo: RepoDep) -> list[Product]:
    return repo.find_all()


@router.get("/search", response_model=list[Product])
async def search_products(
    repo: RepoDep,
    search_history: Annotated[SearchHistoryService, Depends(get_search_history_service)],
    q: str = Query(min_length=1, description="Search term"),
    limit: LimitQuery = 10,
) -> list[Product]:
    await search_history.add(q)
    return repo.search(q, limit=limit)


@router.get("/trending", response_model=list[Product])
async def trending_products(
    repo: RepoDep,
    service: RecommendationDep,
    market: Market | None = None,
    limit: LimitQuery = 10,
) -> list[Product]:
    return service.trending(repo.find_all(), market=market, limit=limit)


@router.get("/recommended", response_model=list[Product])
async def recommended_products(
    repo: RepoDep,
    service: RecommendationDep,
    exclude: Annotated[list[str], Query()] = [],
    limit: LimitQuery = 10,
) -> list[Product]:
    return await service.recommended(repo.find_all(), exclude_ids=exclude, limit=limit)


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, repo: RepoDep) -> Product:
    return _get_or_404(repo, product_id)


@router.get("/{product_id}/related", response_model=list[Product])
async def related_products(
    product_id: str,
    repo: RepoDep,
    service: RecommendationDep,
    limit: LimitQuery = 5,
) -> list[Product]:
    product = _get_or_404(repo, product_id)
    return service.related(repo.find_all(), product.id, product.category, limit=limit)


@router.post("/{product_id}/views", status_code=status.HTTP_204_NO_CONTENT)
async def record_product_view(
    product_id: str,
    repo: RepoDep,
    recently_viewed: Annotated[RecentlyViewedService, Depends(get_recently_viewed_service)],
) -> None:
    product = _get_or_404(repo, product_id)
    await recently_viewed.add(product.id, product.category)
