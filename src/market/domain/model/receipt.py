"""Purchase receipt — the proof of a committed sale."""

from __future__ import annotations

from dataclasses import dataclass

from market.domain.model.product import Product
from market.domain.model.value_objects import Identity, Value


@dataclass(frozen=True)
class PurchaseReceipt:

    id: int
    name: str
    price: Value
    new_owner: Identity
    sold: bool

    @staticmethod
    def for_product(product: Product) -> PurchaseReceipt:
        return PurchaseReceipt(
            id=product.id,
            name=product.name,
            price=product.price,
            new_owner=product.owner,
            sold=product.sold,
        )
