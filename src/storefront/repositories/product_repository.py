# src/storefront/repositories/product_repository.py
from __future__ import annotations

from storefront.domain.models import Product


class ProductRepository:
    """
    In-memory product catalog feeding the recommendation endpoints.

    The catalog of record lives in the hosted backend; this repository only
    holds the copies the client has loaded. Insertion order is kept because
    related/recommended results follow the order of the product list.
    Products are global and not isolated by tenant.
    """

    def __init__(self) -> None:
        self._products: dict[str, Product] = {}

    def save(self, product: Product) -> Product:
        self._products[product.id] = product
        return product

    def find_by_id(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def find_all(self) -> list[Product]:
        return list(self._products.values())

    def search(self, query: str, limit: int = 10) -> list[Product]:
        query_lower = query.strip().lower()
        results = [
            p
            for p in self._products.values()
            if query_lower in p.name.lower() or query_lower in p.category.lower()
        ]
        return results[: max(limit, 0)]
