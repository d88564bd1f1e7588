"""Cart aggregate (CQRS): lines a shopper intends to buy, keyed by account or guest session.

The aggregate enforces its own shape: one owner, one line per product,
positive quantities. Stock checks happen in the CartStore before any of
these methods run, so a failed check leaves the cart untouched.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from commerce.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from commerce.cart.owner import AccountOwner, OwnerKey, SessionOwner
from commerce.domain import commerce
from commerce.errors import InvalidQuantity, ItemNotFound


@commerce.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@commerce.aggregate
class Cart:
    account_id = Identifier()
    session_id = String(max_length=255)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cart_must_have_exactly_one_owner(self):
        if bool(self.account_id) == bool(self.session_id):
            raise ValidationError({"owner": ["A cart belongs to exactly one account or guest session"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner: OwnerKey):
        now = datetime.now(UTC)
        if isinstance(owner, AccountOwner):
            return cls(account_id=owner.account_id, created_at=now, updated_at=now)
        return cls(session_id=owner.session_id, created_at=now, updated_at=now)

    @property
    def owner(self) -> OwnerKey:
        if self.account_id:
            return AccountOwner(account_id=str(self.account_id))
        return SessionOwner(session_id=self.session_id)

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def line_for(self, product_id) -> CartItem | None:
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def item(self, item_id) -> CartItem:
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ItemNotFound(item_id)
        return item

    @property
    def total_items(self) -> int:
        return sum(i.quantity for i in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity):
        """Add a product, or grow its existing line."""
        if quantity <= 0:
            raise InvalidQuantity(quantity)

        now = datetime.now(UTC)
        existing = self.line_for(product_id)
        if existing:
            existing.quantity += quantity
            line = existing
        else:
            line = CartItem(product_id=product_id, quantity=quantity, added_at=now)
            self.add_items(line)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(line.id),
                product_id=str(product_id),
                quantity=quantity,
                line_quantity=line.quantity,
            )
        )
        return line

    def update_item_quantity(self, item_id, new_quantity):
        if new_quantity <= 0:
            raise InvalidQuantity(new_quantity)

        item = self.item(item_id)
        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        item = self.item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
                product_id=str(item.product_id),
            )
        )

    def clear(self):
        """Remove every line. Clearing an empty cart is allowed."""
        lines = list(self.items)
        for line in lines:
            self.remove_items(line)
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                removed_count=len(lines),
                cleared_at=now,
            )
        )
