"""End-to-end tests through the Marketplace composition root.

Uses the ledger gateway, so value movement and its rollback are
observable alongside the product record.
"""

import threading

import pytest

from market.domain.exceptions import (
    AlreadySoldError,
    InvalidIdError,
    ReentrancyRejectedError,
    RefundTransferFailedError,
    SelfPurchaseError,
    SellerTransferFailedError,
)
from market.domain.model.events import ProductCreated, ProductSold
from market.domain.model.value_objects import Identity, Value
from market.infrastructure.bootstrap import build_marketplace
from market.infrastructure.payment.ledger_gateway import LedgerPaymentGateway, Transfer
from tests.fakes import CollectingListener, exploding_listener

U1 = Identity("U1")
U2 = Identity("U2")
U3 = Identity("U3")


def _setup():
    gateway = LedgerPaymentGateway()
    market = build_marketplace(gateway)
    return market, gateway


class TestReferenceScenario:

    def test_phone_sale(self):
        market, gateway = _setup()

        product = market.add_product(U1, "Phone A", 1000)
        assert product.id == 1
        assert product.owner == U1

        receipt = market.buy_product(U2, 1, 1200)
        assert receipt.new_owner == U2
        assert gateway.transfers == [Transfer(U2, Value(200)), Transfer(U1, Value(1000))]

        with pytest.raises(AlreadySoldError):
            market.buy_product(U3, 1, 1000)

        record = market.get_product(1)
        assert record.owner == U2
        assert record.sold is True
        assert gateway.balance_of(U1) == Value(1000)
        assert gateway.balance_of(U2) == Value(200)
        assert gateway.balance_of(U3) == Value(0)

    def test_events_in_commit_order(self):
        market, _ = _setup()
        market.add_product(U1, "Phone A", 1000)
        market.add_product(U2, "Phone B", 500)
        market.buy_product(U3, 2, 500)
        market.buy_product(U3, 1, 1000)

        kinds = [(type(e).__name__, e.id) for e in market.event_log.list_all()]
        assert kinds == [
            ("ProductCreated", 1),
            ("ProductCreated", 2),
            ("ProductSold", 2),
            ("ProductSold", 1),
        ]


class TestReadOnlyState:

    def test_product_count_tracks_sequence(self):
        market, _ = _setup()
        assert market.product_count == 0
        market.add_product(U1, "A", 1)
        market.add_product(U1, "B", 1)
        assert market.product_count == 2

    @pytest.mark.parametrize("product_id", [0, 1, 42])
    def test_get_missing_product(self, product_id):
        market, _ = _setup()
        assert market.get_product(product_id) is None

    def test_returned_record_cannot_mutate_registry(self):
        market, _ = _setup()
        market.add_product(U1, "Phone A", 1000)
        market.get_product(1).sell_to(U2)
        assert market.get_product(1).sold is False

    @pytest.mark.parametrize("product_id", [0, 2])
    def test_buy_missing_product(self, product_id):
        market, _ = _setup()
        market.add_product(U1, "Phone A", 1000)
        with pytest.raises(InvalidIdError):
            market.buy_product(U2, product_id, 1000)


class TestLedgerRollback:

    def test_seller_failure_reverts_refund(self):
        market, gateway = _setup()
        market.add_product(U1, "Phone A", 1000)
        gateway.fail_transfers_to(U1)

        with pytest.raises(SellerTransferFailedError):
            market.buy_product(U2, 1, 1200)

        assert gateway.transfers == []
        assert gateway.balances() == {}
        assert gateway.attempts == [Transfer(U2, Value(200)), Transfer(U1, Value(1000))]
        assert market.get_product(1).owner == U1
        assert market.get_product(1).sold is False

    def test_rejecting_recipient_hook(self):
        market, gateway = _setup()
        market.add_product(U1, "Phone A", 1000)
        gateway.on_receive(U1, lambda to, amount: False)

        with pytest.raises(SellerTransferFailedError, match="rejected the transfer"):
            market.buy_product(U2, 1, 1000)

        assert market.get_product(1).sold is False
        assert gateway.balance_of(U1) == Value(0)

    def test_self_purchase_moves_nothing(self):
        market, gateway = _setup()
        market.add_product(U1, "Phone A", 1000)
        with pytest.raises(SelfPurchaseError):
            market.buy_product(U1, 1, 1500)
        assert gateway.attempts == []


class TestHostileRecipient:

    def test_reentrant_buy_rejected_and_outer_sale_completes(self):
        market, gateway = _setup()
        market.add_product(U1, "Phone A", 1000)
        market.add_product(U3, "Phone B", 400)
        attempts = []

        def attack(to, amount):
            try:
                market.buy_product(to, 2, 400)
            except ReentrancyRejectedError as exc:
                attempts.append(exc)
            return True

        gateway.on_receive(U1, attack)

        receipt = market.buy_product(U2, 1, 1000)

        assert len(attempts) == 1
        assert receipt.new_owner == U2
        assert market.get_product(2).sold is False
        assert gateway.balance_of(U1) == Value(1000)

    def test_uncaught_reentry_fails_seller_transfer(self):
        market, gateway = _setup()
        market.add_product(U1, "Phone A", 1000)
        gateway.on_receive(U1, lambda to, amount: market.buy_product(U3, 1, 1000))

        with pytest.raises(SellerTransferFailedError, match="ReentrancyRejectedError") as info:
            market.buy_product(U2, 1, 1200)

        assert info.value.recipient == U1
        assert market.get_product(1).owner == U1
        assert market.get_product(1).sold is False
        assert gateway.balances() == {}
        assert gateway.transfers == []

    def test_uncaught_reentry_on_refund_fails_refund_transfer(self):
        market, gateway = _setup()
        market.add_product(U1, "Phone A", 1000)
        gateway.on_receive(U2, lambda to, amount: market.buy_product(U3, 1, 1000))

        with pytest.raises(RefundTransferFailedError):
            market.buy_product(U2, 1, 1200)

        assert gateway.attempts == [Transfer(U2, Value(200))]
        assert market.get_product(1).sold is False

    def test_reentrant_buy_sees_product_already_sold(self):
        market, gateway = _setup()
        market.add_product(U1, "Phone A", 1000)
        seen = []

        def inspect(to, amount):
            seen.append(market.get_product(1))
            return True

        gateway.on_receive(U1, inspect)
        market.buy_product(U2, 1, 1000)

        assert seen[0].sold is True
        assert seen[0].owner == U2

    def test_other_thread_rejected_while_purchase_in_flight(self):
        market, gateway = _setup()
        market.add_product(U1, "Phone A", 1000)
        market.add_product(U1, "Phone B", 700)
        outcome = {}

        def other_thread():
            try:
                market.buy_product(U3, 2, 700)
            except ReentrancyRejectedError:
                outcome["buy"] = "rejected"
            # Listing and reads are not guarded.
            outcome["added"] = market.add_product(U3, "Tablet", 300).id
            outcome["seen"] = market.get_product(1)

        def run_other_thread(to, amount):
            worker = threading.Thread(target=other_thread)
            worker.start()
            worker.join()
            return True

        gateway.on_receive(U1, run_other_thread)
        market.buy_product(U2, 1, 1000)

        assert outcome["buy"] == "rejected"
        assert outcome["added"] == 3
        assert outcome["seen"].sold is True
        assert market.get_product(2).sold is False


class TestObservers:

    def test_listener_receives_events(self):
        market, _ = _setup()
        listener = CollectingListener()
        market.event_log.subscribe(listener)

        market.add_product(U1, "Phone A", 1000)
        market.buy_product(U2, 1, 1000)

        assert [type(e) for e in listener.events] == [ProductCreated, ProductSold]

    def test_failing_listener_does_not_break_purchase(self):
        market, _ = _setup()
        market.event_log.subscribe(exploding_listener)
        listener = CollectingListener()
        market.event_log.subscribe(listener)

        market.add_product(U1, "Phone A", 1000)
        receipt = market.buy_product(U2, 1, 1000)

        assert receipt.sold is True
        assert len(listener.events) == 2
