"""Domain events published to external observers.

Events are immutable facts about committed state changes.  They are
emitted only after the change they describe has fully committed.
"""

from __future__ import annotations

from dataclasses import dataclass

from market.domain.model.product import Product
from market.domain.model.value_objects import Identity, Value


@dataclass(frozen=True)
class ProductCreated:
    id: int
    name: str
    price: Value
    owner: Identity
    sold: bool

    @staticmethod
    def from_product(product: Product) -> ProductCreated:
        return ProductCreated(
            id=product.id,
            name=product.name,
            price=product.price,
            owner=product.owner,
            sold=product.sold,
        )


@dataclass(frozen=True)
class ProductSold:
    id: int
    name: str
    price: Value
    new_owner: Identity
    sold: bool

    @staticmethod
    def from_product(product: Product) -> ProductSold:
        return ProductSold(
            id=product.id,
            name=product.name,
            price=product.price,
            new_owner=product.owner,
            sold=product.sold,
        )


DomainEvent = ProductCreated | ProductSold
