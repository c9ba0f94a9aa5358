"""Application service: List Products use case (query)."""

from __future__ import annotations

from market.application.dto import ProductDTO
from market.domain.repository.product_registry import ProductRegistry


class ListProductsHandler:

    def __init__(self, registry: ProductRegistry) -> None:
        self._registry = registry

    def handle(self) -> list[ProductDTO]:
        return [ProductDTO.from_product(p) for p in self._registry.list_all()]
