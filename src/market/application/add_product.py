"""Application service: Add Product use case."""

from __future__ import annotations

from market.domain.model.events import ProductCreated
from market.domain.model.product import Product
from market.domain.model.value_objects import Identity, Value
from market.domain.repository.event_log import EventLog
from market.domain.repository.product_registry import ProductRegistry


class AddProductHandler:

    def __init__(self, registry: ProductRegistry, event_log: EventLog) -> None:
        self._registry = registry
        self._event_log = event_log

    def handle(self, caller: Identity, name: str, price: str | int | Value) -> Product:
        """List a new product owned by *caller*.

        The registry assigns the id and validates name and price.  The
        ``ProductCreated`` event is appended inside the registry's commit,
        so concurrent listings are logged in id order.
        """
        return self._registry.create(name, price, caller, on_commit=self._publish)

    def _publish(self, product: Product) -> None:
        self._event_log.append(ProductCreated.from_product(product))
