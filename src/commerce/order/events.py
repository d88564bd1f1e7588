"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """An order's stock was reserved and its line items were recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    account_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, unit_price}
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderPaid:
    """The payment collaborator confirmed payment for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    account_id = Identifier(required=True)
    total_amount = Float(required=True)
    paid_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled; its stock goes back to inventory."""

    __version__ = 1

    order_id = Identifier(required=True)
    account_id = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)
