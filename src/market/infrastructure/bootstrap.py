"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from market.application.add_product import AddProductHandler
from market.application.buy_product import BuyProductHandler
from market.application.dto import ProductDTO
from market.application.list_products import ListProductsHandler
from market.application.show_product import ShowProductHandler
from market.domain.model.product import Product
from market.domain.model.receipt import PurchaseReceipt
from market.domain.model.value_objects import Identity, Value
from market.domain.repository.event_log import EventLog
from market.domain.repository.product_registry import ProductRegistry
from market.domain.service.payment_gateway import PaymentGateway
from market.domain.service.purchase_engine import PurchaseEngine
from market.infrastructure.payment.ledger_gateway import LedgerPaymentGateway
from market.infrastructure.persistence.in_memory_event_log import InMemoryEventLog
from market.infrastructure.persistence.in_memory_product_registry import (
    InMemoryProductRegistry,
)


class Marketplace:
    """One self-contained marketplace: registry, event log, gateway, engine.

    Exposes the public operations.  Every caller-facing operation takes the
    caller's identity explicitly.
    """

    def __init__(
        self,
        registry: ProductRegistry,
        event_log: EventLog,
        gateway: PaymentGateway,
    ) -> None:
        self.registry = registry
        self.event_log = event_log
        self.gateway = gateway
        self.engine = PurchaseEngine(registry, gateway, event_log)
        self._add = AddProductHandler(registry, event_log)
        self._buy = BuyProductHandler(self.engine)
        self._show = ShowProductHandler(registry)
        self._list = ListProductsHandler(registry)

    @property
    def product_count(self) -> int:
        """The current id sequence: how many products were ever listed."""
        return self.registry.sequence

    def add_product(self, caller: Identity, name: str, price: str | int | Value) -> Product:
        return self._add.handle(caller, name, price)

    def buy_product(self, caller: Identity, product_id: int, amount: str | int | Value) -> PurchaseReceipt:
        return self._buy.handle(caller, product_id, amount)

    def get_product(self, product_id: int) -> Product | None:
        return self.registry.get(product_id)

    def show_product(self, product_id: int) -> ProductDTO:
        return self._show.handle(product_id)

    def list_products(self) -> list[ProductDTO]:
        return self._list.handle()


def build_marketplace(gateway: PaymentGateway | None = None) -> Marketplace:
    """Build a fresh in-memory marketplace, optionally with a custom gateway."""
    return Marketplace(
        registry=InMemoryProductRegistry(),
        event_log=InMemoryEventLog(),
        gateway=gateway or LedgerPaymentGateway(),
    )
