"""Test doubles for the purchase engine's collaborators.

``RecordingGateway`` implements the PaymentGateway interface without a
ledger: it records every call and can be told to fail.  It keeps the
default no-op ``atomic()`` so engine behaviour can be checked against a
gateway that has nothing to undo.
"""

from __future__ import annotations

from typing import Callable

from market.domain.model.value_objects import Identity, Value
from market.domain.service.payment_gateway import PaymentGateway, TransferResult


class RecordingGateway(PaymentGateway):

    def __init__(self) -> None:
        self.calls: list[tuple[Identity, Value]] = []
        self.failing: set[Identity] = set()
        self.on_transfer: Callable[[Identity, Value], None] | None = None

    def transfer(self, to: Identity, amount: Value) -> TransferResult:
        self.calls.append((to, amount))
        if self.on_transfer is not None:
            try:
                self.on_transfer(to, amount)
            except Exception as exc:
                return TransferResult.failed(f"recipient raised {exc!r}")
        if to in self.failing:
            return TransferResult.failed("forced failure")
        return TransferResult.ok()


class CollectingListener:

    def __init__(self) -> None:
        self.events: list = []

    def __call__(self, event) -> None:
        self.events.append(event)


def exploding_listener(event) -> None:
    raise RuntimeError("observer is down")
