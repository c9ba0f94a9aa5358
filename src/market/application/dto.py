"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from market.domain.model.product import Product


@dataclass(frozen=True)
class ProductDTO:
    """Output: a listing as displayed to the user."""

    id: int
    name: str
    price: int  # smallest value unit
    owner: str
    sold: bool

    @staticmethod
    def from_product(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            price=product.price.amount,
            owner=str(product.owner),
            sold=product.sold,
        )
