"""Domain service: Purchase Engine.

Runs the buy transaction.  Every invocation follows the same strict
order:

  1. Guard     — take the process-wide reentrancy guard or fail fast.
  2. Checks    — read-only validation against the registry.
  3. Effects   — record the new owner and the sold flag.
  4. Interact  — refund the buyer's change, then pay the seller.
  5. Publish   — append ``ProductSold`` to the event log.

State is mutated *before* any external code runs, so a recipient that
calls back into the marketplace sees the product as sold.  If anything
fails after step 3, the ownership change and every transfer made inside
the gateway's atomic scope are undone before the error propagates: the
caller observes either the whole sale or none of it.
"""

from __future__ import annotations

import structlog

from market.domain.exceptions import (
    AlreadySoldError,
    DomainException,
    InsufficientPaymentError,
    InvalidIdError,
    RefundTransferFailedError,
    SelfPurchaseError,
    SellerTransferFailedError,
)
from market.domain.model.events import ProductSold
from market.domain.model.product import Product
from market.domain.model.receipt import PurchaseReceipt
from market.domain.model.value_objects import Identity, Value
from market.domain.repository.event_log import EventLog
from market.domain.repository.product_registry import ProductRegistry
from market.domain.service.payment_gateway import PaymentGateway
from market.domain.service.reentrancy_guard import ReentrancyGuard

logger = structlog.get_logger(component="purchase_engine")


class PurchaseEngine:

    def __init__(
        self,
        registry: ProductRegistry,
        gateway: PaymentGateway,
        event_log: EventLog,
        guard: ReentrancyGuard | None = None,
    ) -> None:
        self._registry = registry
        self._gateway = gateway
        self._event_log = event_log
        self._guard = guard or ReentrancyGuard()

    @property
    def in_progress(self) -> bool:
        """True while a purchase holds the guard."""
        return self._guard.locked

    def buy(self, product_id: int, buyer: Identity, amount: str | int | Value) -> PurchaseReceipt:
        """Sell product *product_id* to *buyer*, who attached *amount*.

        Raises a DomainException subclass when the purchase is rejected.
        Whatever the failure, the registry and the gateway are left exactly
        as before the call.
        """
        log = logger.bind(product_id=product_id, buyer=str(buyer))
        try:
            with self._guard.hold():
                receipt = self._execute(product_id, buyer, Value.of(amount), log)
        except DomainException as exc:
            log.info("purchase_rejected", error=type(exc).__name__, reason=str(exc))
            raise

        log.info("purchase_completed", price=receipt.price.amount)
        return receipt

    # --- Transaction steps ----------------------------------------------------

    def _execute(
        self,
        product_id: int,
        buyer: Identity,
        amount: Value,
        log: structlog.typing.FilteringBoundLogger,
    ) -> PurchaseReceipt:
        product = self._check(product_id, buyer, amount)
        seller = product.owner
        log.debug("purchase_started", seller=str(seller), price=product.price.amount, amount=amount.amount)

        product.sell_to(buyer)
        self._registry.update(product.id, product.owner, product.sold)

        try:
            with self._gateway.atomic():
                self._settle(product, buyer, seller, amount)
        except Exception as exc:
            self._registry.update(product.id, seller, False)
            log.warning("purchase_rolled_back", error=type(exc).__name__)
            raise

        self._event_log.append(ProductSold.from_product(product))
        return PurchaseReceipt.for_product(product)

    def _check(self, product_id: int, buyer: Identity, amount: Value) -> Product:
        product = self._registry.get(product_id)
        if product is None:
            raise InvalidIdError(f"Product #{product_id} does not exist")

        if product.sold:
            raise AlreadySoldError(f"Product #{product.id} is already sold")

        if amount < product.price:
            raise InsufficientPaymentError(
                f"Insufficient payment for product #{product.id} "
                f"(price {product.price}, got {amount})"
            )

        if buyer == product.owner:
            raise SelfPurchaseError(f"Owner cannot buy their own product #{product.id}")

        return product

    def _settle(self, product: Product, buyer: Identity, seller: Identity, amount: Value) -> None:
        price = product.price

        if amount > price:
            change = amount - price
            result = self._gateway.transfer(buyer, change)
            if not result.success:
                raise RefundTransferFailedError(
                    f"Refund of {change} to {buyer} failed: {result.failure_reason}",
                    recipient=buyer,
                    amount=change,
                    reason=result.failure_reason,
                )

        result = self._gateway.transfer(seller, price)
        if not result.success:
            raise SellerTransferFailedError(
                f"Payment of {price} to seller {seller} failed: {result.failure_reason}",
                recipient=seller,
                amount=price,
                reason=result.failure_reason,
            )
