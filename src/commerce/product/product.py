"""Product aggregate (CQRS): the catalogue entry the engine prices and stocks from.

The catalogue owns product creation and pricing. The commerce engine only
moves ``stock`` up and down, always through the repository's conditional
update so the count never goes negative.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from commerce.domain import commerce
from commerce.pricing import round_money
from commerce.product.events import ProductRepriced, StockRestored, StockWithdrawn


@commerce.aggregate
class Product:
    name = String(required=True, max_length=255)
    sku = String(required=True, max_length=50)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, sku, price, stock=0):
        now = datetime.now(UTC)
        return cls(
            name=name,
            sku=sku,
            price=float(round_money(price)),
            stock=stock,
            created_at=now,
            updated_at=now,
        )

    def reprice(self, new_price):
        """Change the unit price. Orders already placed keep their frozen price."""
        new_price = float(round_money(new_price))
        if new_price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

        previous_price = self.price
        self.price = new_price
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            ProductRepriced(
                product_id=str(self.id),
                previous_price=previous_price,
                new_price=new_price,
                repriced_at=now,
            )
        )

    def withdraw_stock(self, quantity):
        """Take ``quantity`` units out of stock. Callers must hold the stock lock."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if self.stock < quantity:
            raise ValidationError({"quantity": [f"Insufficient stock: {self.stock} available, {quantity} requested"]})

        previous_stock = self.stock
        self.stock = previous_stock - quantity
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=self.stock,
                withdrawn_at=now,
            )
        )

    def restore_stock(self, quantity):
        """Put ``quantity`` units back into stock."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous_stock = self.stock
        self.stock = previous_stock + quantity
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=self.stock,
                restored_at=now,
            )
        )
