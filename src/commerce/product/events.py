"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer

from commerce.domain import commerce


@commerce.event(part_of="Product")
class StockWithdrawn:
    """Units were taken out of stock by a reservation."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    withdrawn_at = DateTime(required=True)


@commerce.event(part_of="Product")
class StockRestored:
    """Units were put back into stock (compensation or order cancellation)."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    restored_at = DateTime(required=True)


@commerce.event(part_of="Product")
class ProductRepriced:
    """The catalogue changed a product's unit price."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)
    repriced_at = DateTime(required=True)
