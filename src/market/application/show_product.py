"""Application service: Show Product use case (query)."""

from __future__ import annotations

from market.application.dto import ProductDTO
from market.domain.exceptions import ProductNotFoundError
from market.domain.repository.product_registry import ProductRegistry


class ShowProductHandler:

    def __init__(self, registry: ProductRegistry) -> None:
        self._registry = registry

    def handle(self, product_id: int) -> ProductDTO:
        product = self._registry.get(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product #{product_id} not found")
        return ProductDTO.from_product(product)
