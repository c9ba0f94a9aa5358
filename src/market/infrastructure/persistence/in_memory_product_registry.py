"""In-memory implementation of ProductRegistry.

Records live in a dict keyed by id.  A re-entrant lock serializes every
write together with the id sequence, and reads hand out copies, so an
observer sees a record either before or after a mutation, never halfway.
"""

from __future__ import annotations

import threading
from typing import Callable

import structlog

from market.domain.model.product import Product
from market.domain.model.value_objects import Identity, Value
from market.domain.repository.product_registry import ProductRegistry

logger = structlog.get_logger(component="product_registry")


class InMemoryProductRegistry(ProductRegistry):

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sequence = 0
        self._records: dict[int, Product] = {}

    # --- ProductRegistry interface --------------------------------------------

    @property
    def sequence(self) -> int:
        with self._lock:
            return self._sequence

    def create(
        self,
        name: str,
        price: str | int | Value,
        creator: Identity,
        on_commit: Callable[[Product], None] | None = None,
    ) -> Product:
        with self._lock:
            # Validate before touching the sequence so a rejected listing
            # never burns an id.
            product = Product.create(self._sequence + 1, name, price, creator)
            self._sequence = product.id
            self._records[product.id] = product
            logger.debug("product_stored", product_id=product.id, owner=str(creator))
            stored = product.copy()
            if on_commit is not None:
                on_commit(stored.copy())
            return stored

    def get(self, product_id: int) -> Product | None:
        with self._lock:
            if product_id <= 0 or product_id > self._sequence:
                return None
            record = self._records.get(product_id)
            return record.copy() if record is not None else None

    def update(self, product_id: int, new_owner: Identity, sold: bool) -> None:
        with self._lock:
            record = self._records[product_id]
            self._records[product_id] = Product(
                id=record.id,
                name=record.name,
                price=record.price,
                owner=new_owner,
                sold=sold,
            )
            logger.debug("product_updated", product_id=product_id, owner=str(new_owner), sold=sold)

    def list_all(self) -> list[Product]:
        with self._lock:
            return [self._records[pid].copy() for pid in sorted(self._records)]
