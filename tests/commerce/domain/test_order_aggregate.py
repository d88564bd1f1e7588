"""Tests for the Order aggregate: creation, items and the status state machine."""

import json

import pytest
from protean.exceptions import ValidationError

from commerce.errors import InvalidStatusTransition
from commerce.order.events import OrderCancelled, OrderPaid, OrderPlaced
from commerce.order.order import Order, OrderStatus


def _lines():
    return [
        {"product_id": "prod-1", "sku": "SKU-1", "name": "One", "quantity": 2, "unit_price": 10.0},
        {"product_id": "prod-2", "sku": "SKU-2", "name": "Two", "quantity": 1, "unit_price": 5.5},
    ]


@pytest.fixture()
def order():
    return Order.create(account_id="acct-1", total_amount=25.5)


class TestOrderCreation:
    def test_create_is_pending(self, order):
        assert order.status == OrderStatus.PENDING.value
        assert order.total_amount == 25.5
        assert len(order.items) == 0

    def test_account_required(self):
        with pytest.raises(ValidationError):
            Order.create(account_id=None, total_amount=1.0)

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError):
            Order.create(account_id="acct-1", total_amount=-1.0)


class TestRecordItems:
    def test_records_lines(self, order):
        order.record_items(_lines())
        assert len(order.items) == 2
        assert order.items[0].unit_price == 10.0

    def test_raises_order_placed(self, order):
        order._events.clear()
        order.record_items(_lines())

        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.item_count == 2
        assert json.loads(event.items)[0]["product_id"] == "prod-1"

    def test_only_once(self, order):
        order.record_items(_lines())
        with pytest.raises(ValidationError):
            order.record_items(_lines())

    def test_empty_lines_rejected(self, order):
        with pytest.raises(ValidationError):
            order.record_items([])


class TestStatusTransitions:
    def test_pending_to_paid(self, order):
        order._events.clear()
        order.mark_paid()
        assert order.status == OrderStatus.PAID.value
        assert isinstance(order._events[0], OrderPaid)

    def test_pending_to_cancelled(self, order):
        order._events.clear()
        order.cancel(reason="changed mind")
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancellation_reason == "changed mind"
        assert isinstance(order._events[0], OrderCancelled)

    def test_paid_is_terminal(self, order):
        order.mark_paid()
        with pytest.raises(InvalidStatusTransition):
            order.cancel()

    def test_cancelled_is_terminal(self, order):
        order.cancel()
        with pytest.raises(InvalidStatusTransition) as exc_info:
            order.mark_paid()
        assert exc_info.value.current == "Cancelled"
        assert exc_info.value.target == "Paid"

    def test_cannot_cancel_twice(self, order):
        order.cancel()
        with pytest.raises(InvalidStatusTransition):
            order.cancel()
