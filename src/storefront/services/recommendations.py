from __future__ import annotations

import logging
from collections.abc import Collection, Sequence

from storefront.domain.models import Market, Product
from storefront.services.recently_viewed import RecentlyViewedService

logger = logging.getLogger(__name__)


def trending_products(
    products: Sequence[Product], market: Market, limit: int = 10
) -> list[Product]:
    """
    Active products in stock for `market`, highest stock first.

    Products with equal stock keep their input order (sorted() is stable).
    """
    in_stock = [p for p in products if p.active and p.stock_for(market) > 0]
    ranked = sorted(in_stock, key=lambda p: p.stock_for(market), reverse=True)
    return ranked[: max(limit, 0)]


def related_products(
    products: Sequence[Product], product_id: str, category: str, limit: int = 5
) -> list[Product]:
    """Other active products of the same category, in input order."""
    related = [
        p for p in products if p.active and p.id != product_id and p.category == category
    ]
    return related[: max(limit, 0)]


class RecommendationService:
    def __init__(
        self,
        recently_viewed: RecentlyViewedService,
        default_market: Market = Market.GERMANY,
    ) -> None:
        self._recently_viewed = recently_viewed
        self._default_market = default_market

    def trending(
        self, products: Sequence[Product], market: Market | None = None, limit: int = 10
    ) -> list[Product]:
        return trending_products(products, market or self._default_market, limit)

    def related(
        self, products: Sequence[Product], product_id: str, category: str, limit: int = 5
    ) -> list[Product]:
        return related_products(products, product_id, category, limit)

    async def recommended(
        self,
        products: Sequence[Product],
        exclude_ids: Collection[str] = (),
        limit: int = 10,
    ) -> list[Product]:
        """
        Products from the categories the user has been looking at, topped up
        with trending products (default market) when there are not enough.
        Without any view history this is just the trending list.

        `exclude_ids` only filters the category matches. The trending list and
        the trending backfill do not apply it, so an excluded product can still
        appear there.
        """
        limit = max(limit, 0)
        history = await self._recently_viewed.list()
        if not history:
            return trending_products(products, self._default_market, limit)

        viewed_categories = {e.tag for e in history if e.tag}
        excluded = set(exclude_ids)
        selected = [
            p
            for p in products
            if p.active and p.id not in excluded and p.category in viewed_categories
        ][:limit]
        if len(selected) >= limit:
            return selected

        selected_ids = {p.id for p in selected}
        for product in trending_products(products, self._default_market, len(products)):
            if len(selected) >= limit:
                break
            if product.id not in selected_ids:
                selected.append(product)
                selected_ids.add(product.id)

        logger.debug(
            "Recommended %d product(s) from %d viewed categories",
            len(selected),
            len(viewed_categories),
        )
        return selected
