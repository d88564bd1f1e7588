"""Order aggregate (CQRS): an immutable record of what was bought and at what price.

State Machine:
    PENDING → PAID
    PENDING → CANCELLED
    PAID and CANCELLED are terminal.

The total and every line's unit price are captured once, when the order is
placed, and are never re-derived from live product prices.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from commerce.domain import commerce
from commerce.errors import InvalidStatusTransition
from commerce.order.events import OrderCancelled, OrderPaid, OrderPlaced


class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    CANCELLED = "Cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


@commerce.entity(part_of="Order")
class OrderItem:
    """A purchased line. ``unit_price`` is the product price at the moment of ordering."""

    product_id = Identifier(required=True)
    sku = String(max_length=50)
    name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


@commerce.aggregate
class Order:
    account_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    total_amount = Float(required=True, min_value=0.0)
    items = HasMany(OrderItem)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, account_id, total_amount):
        """Open a PENDING order with its frozen total. Line items are attached once stock is reserved."""
        now = datetime.now(UTC)
        return cls(
            account_id=account_id,
            status=OrderStatus.PENDING.value,
            total_amount=total_amount,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Line items
    # -------------------------------------------------------------------
    def record_items(self, lines):
        """Attach the purchased lines. Allowed exactly once, while PENDING.

        Args:
            lines: List of dicts with product_id, sku, name, quantity, unit_price.
        """
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": ["Items can only be recorded on a Pending order"]})
        if self.items:
            raise ValidationError({"items": ["Order items are already recorded"]})
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        for line in lines:
            self.add_items(
                OrderItem(
                    product_id=line["product_id"],
                    sku=line.get("sku"),
                    name=line.get("name"),
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                )
            )

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                account_id=str(self.account_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "quantity": item.quantity,
                            "unit_price": item.unit_price,
                        }
                        for item in self.items
                    ]
                ),
                item_count=len(self.items),
                total_amount=self.total_amount,
                placed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStatusTransition(current.value, target_status.value)

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def mark_paid(self):
        self._assert_can_transition(OrderStatus.PAID)
        self.status = OrderStatus.PAID.value
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                account_id=str(self.account_id),
                total_amount=self.total_amount,
                paid_at=now,
            )
        )

    def cancel(self, reason=None):
        """Cancel a PENDING order. Releasing its stock is the caller's job."""
        self._assert_can_transition(OrderStatus.CANCELLED)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                account_id=str(self.account_id),
                reason=reason,
                cancelled_at=now,
            )
        )
