"""In-memory ledger implementation of PaymentGateway.

Credits each recipient's balance and journals every transfer so an
``atomic()`` block can be undone.  Recipients may register a hook that
runs on every incoming transfer; hooks are untrusted code and may call
straight back into the marketplace.

For tests and the scenario runner the ledger can be told to fail
transfers, either to particular identities or across the board.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

import structlog

from market.domain.model.value_objects import ZERO, Identity, Value
from market.domain.service.payment_gateway import PaymentGateway, TransferResult

logger = structlog.get_logger(component="ledger_gateway")

# Returning False, or raising, rejects the incoming transfer.
ReceiveHook = Callable[[Identity, Value], bool]


@dataclass(frozen=True)
class Transfer:
    to: Identity
    amount: Value


class LedgerPaymentGateway(PaymentGateway):

    def __init__(self) -> None:
        self._balances: dict[Identity, Value] = {}
        self._hooks: dict[Identity, ReceiveHook] = {}
        self._failing: set[Identity] = set()
        self.fail_all = False
        self.transfers: list[Transfer] = []  # committed, rolled back with balances
        self.attempts: list[Transfer] = []  # every call, never rolled back

    # --- PaymentGateway interface ---------------------------------------------

    def transfer(self, to: Identity, amount: Value) -> TransferResult:
        self.attempts.append(Transfer(to, amount))
        log = logger.bind(to=str(to), amount=amount.amount)

        if amount <= ZERO:
            return self._reject(log, "Transfer amount must be positive")
        if self.fail_all or to in self._failing:
            return self._reject(log, f"Transfers to {to} are failing")

        # Credit first so a hook that inspects the ledger sees the funds.
        self._credit(to, amount)
        entry = len(self.transfers)
        self.transfers.append(Transfer(to, amount))

        hook = self._hooks.get(to)
        if hook is None:
            log.debug("transfer_completed")
            return TransferResult.ok()

        try:
            accepted = hook(to, amount) is not False
            reason = f"Recipient {to} rejected the transfer"
        except Exception as exc:
            accepted = False
            reason = f"Recipient {to} raised {type(exc).__name__}: {exc}"

        if not accepted:
            self._debit(to, amount)
            del self.transfers[entry]
            return self._reject(log, reason)

        log.debug("transfer_completed")
        return TransferResult.ok()

    @contextmanager
    def atomic(self) -> Iterator[None]:
        balances = dict(self._balances)
        journal_length = len(self.transfers)
        try:
            yield
        except Exception:
            reverted = len(self.transfers) - journal_length
            self._balances = balances
            del self.transfers[journal_length:]
            logger.info("transfers_reverted", count=reverted)
            raise

    # --- Test and scenario controls -------------------------------------------

    def balance_of(self, identity: Identity) -> Value:
        return self._balances.get(identity, ZERO)

    def balances(self) -> dict[Identity, Value]:
        return dict(self._balances)

    def on_receive(self, identity: Identity, hook: ReceiveHook) -> None:
        self._hooks[identity] = hook

    def fail_transfers_to(self, identity: Identity) -> None:
        self._failing.add(identity)

    def restore_transfers_to(self, identity: Identity) -> None:
        self._failing.discard(identity)

    # --- Internal helpers -----------------------------------------------------

    def _credit(self, to: Identity, amount: Value) -> None:
        self._balances[to] = self.balance_of(to) + amount

    def _debit(self, to: Identity, amount: Value) -> None:
        self._balances[to] = self.balance_of(to) - amount

    @staticmethod
    def _reject(log: structlog.typing.FilteringBoundLogger, reason: str) -> TransferResult:
        log.info("transfer_failed", reason=reason)
        return TransferResult.failed(reason)
