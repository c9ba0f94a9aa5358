"""Payment gateway port.

Defines the contract for moving value to an identity.  This enables
swapping between the in-memory ledger (CLI, tests) and any other
settlement backend without changing the purchase engine.

A transfer that fails for an ordinary reason (rejecting recipient, no
capacity, forced failure) is reported through ``TransferResult``, never
raised.  The purchase engine turns such a result into a rollback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from market.domain.model.value_objects import Identity, Value


@dataclass(frozen=True)
class TransferResult:
    """Result of a transfer attempt."""

    success: bool
    failure_reason: str | None = None

    @staticmethod
    def ok() -> TransferResult:
        return TransferResult(success=True)

    @staticmethod
    def failed(reason: str) -> TransferResult:
        return TransferResult(success=False, failure_reason=reason)


class PaymentGateway(ABC):

    @abstractmethod
    def transfer(self, to: Identity, amount: Value) -> TransferResult:
        """Move *amount* to *to*, reporting success or failure."""

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Group transfers into an all-or-nothing unit.

        Gateways that can undo a completed transfer override this to
        reverse everything done inside the block when it exits with an
        exception.  The default has nothing to undo.
        """
        yield
