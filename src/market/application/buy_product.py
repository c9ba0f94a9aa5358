"""Application service: Buy Product use case.

Thin wrapper: everything that makes the purchase safe (guard, checks,
ordering, rollback) lives in the PurchaseEngine domain service.
"""

from __future__ import annotations

from market.domain.model.receipt import PurchaseReceipt
from market.domain.model.value_objects import Identity, Value
from market.domain.service.purchase_engine import PurchaseEngine


class BuyProductHandler:

    def __init__(self, engine: PurchaseEngine) -> None:
        self._engine = engine

    def handle(self, caller: Identity, product_id: int, amount: str | int | Value) -> PurchaseReceipt:
        """Buy *product_id* for *caller*, who attaches *amount*.

        Any value above the price is refunded to the caller.
        """
        return self._engine.buy(product_id, caller, amount)
