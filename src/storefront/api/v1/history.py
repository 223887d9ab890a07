# src/storefront/api/v1/history.py
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import get_recently_viewed_service, get_search_history_service
from storefront.domain.models import HistoryEntry, SearchCreate
from storefront.services.recently_viewed import RecentlyViewedService
from storefront.services.search_history import SearchHistoryService

router = APIRouter(prefix="/history", tags=["History"])

RecentlyViewedDep = Annotated[RecentlyViewedService, Depends(get_recently_viewed_service)]
SearchHistoryDep = Annotated[SearchHistoryService, Depends(get_search_history_service)]


@router.get("/recently-viewed", response_model=list[HistoryEntry])
async def get_recently_viewed(service: RecentlyViewedDep) -> list[HistoryEntry]:
    return await service.list()


@router.delete("/recently-viewed", status_code=status.HTTP_204_NO_CONTENT)
async def clear_recently_viewed(service: RecentlyViewedDep) -> None:
    await service.clear()


@router.delete("/recently-viewed/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_recently_viewed(product_id: str, service: RecentlyViewedDep) -> None:
    await service.remove(product_id)


@router.get("/searches", response_model=list[HistoryEntry])
async def get_search_history(service: SearchHistoryDep) -> list[HistoryEntry]:
    return await service.list()


@router.post("/searches", status_code=status.HTTP_204_NO_CONTENT)
async def add_search(payload: SearchCreate, service: SearchHistoryDep) -> None:
    await service.add(payload.query, payload.category)


@router.get("/searches/suggestions", response_model=list[str])
async def get_search_suggestions(
    service: SearchHistoryDep,
    q: str = Query(default="", description="Text typed so far"),
    limit: Annotated[int, Query(ge=0, le=50)] = 5,
) -> list[str]:
    return await service.suggestions(q, limit=limit)


@router.delete("/searches", status_code=status.HTTP_204_NO_CONTENT)
async def clear_search_history(service: SearchHistoryDep) -> None:
    await service.clear()


@router.delete("/searches/{query}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_search(query: str, service: SearchHistoryDep) -> None:
    await service.remove(query)
