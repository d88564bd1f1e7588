"""Cart store: stock-aware cart mutation and guest-to-account merging.

Every add or update validates the resulting line quantity against current
stock before the cart changes. Checks are advisory: nothing is reserved
until an order is placed.
"""

from dataclasses import dataclass, field

import structlog

from commerce.cart.cart import Cart
from commerce.cart.owner import AccountOwner, OwnerKey, SessionOwner
from commerce.errors import InsufficientStock, ProductNotFound
from commerce.inventory.ledger import require_positive_quantity
from commerce.pricing import compute_totals, to_decimal

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MergeSkip:
    """A guest line that could not be moved into the account cart."""

    product_id: str
    quantity: int
    reason: str


@dataclass
class MergeResult:
    cart: Cart
    merged: list[str] = field(default_factory=list)
    skipped: list[MergeSkip] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.skipped)


class CartStore:
    def __init__(self, carts, products, ledger):
        self._carts = carts
        self._products = products
        self._ledger = ledger

    # -------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------
    def resolve_cart(self, owner: OwnerKey) -> Cart:
        """Return the owner's cart, creating an empty one on first access."""
        cart = self._carts.find_for_owner(owner)
        if cart is None:
            cart = Cart.create(owner)
            self._carts.add(cart)
            logger.info("Cart created", cart_id=str(cart.id), owner=repr(owner))
        return cart

    # -------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------
    def add_item(self, cart: Cart, product_id, quantity: int) -> Cart:
        require_positive_quantity(quantity)

        line = cart.line_for(product_id)
        cumulative = (line.quantity if line else 0) + quantity
        self._ledger.check_availability(product_id, cumulative).raise_for_status()

        cart.add_item(product_id, quantity)
        self._carts.add(cart)
        return cart

    def update_item(self, cart: Cart, item_id, quantity: int) -> Cart:
        require_positive_quantity(quantity)

        line = cart.item(item_id)
        self._ledger.check_availability(line.product_id, quantity).raise_for_status()

        cart.update_item_quantity(item_id, quantity)
        self._carts.add(cart)
        return cart

    def remove_item(self, cart: Cart, item_id) -> Cart:
        cart.remove_item(item_id)
        self._carts.add(cart)
        return cart

    def clear(self, cart: Cart) -> Cart:
        cart.clear()
        self._carts.add(cart)
        return cart

    # -------------------------------------------------------------------
    # Guest → account merge
    # -------------------------------------------------------------------
    def merge_guest_into_account(self, session_id, account_id) -> MergeResult:
        """Move a guest cart's lines into the account cart, line by line.

        Lines that fail the stock check are skipped and reported; the rest
        still merge. The guest cart is deleted once every line was attempted.
        """
        account_cart = self.resolve_cart(AccountOwner(account_id=str(account_id)))
        guest_cart = self._carts.find_for_owner(SessionOwner(session_id=str(session_id)))

        result = MergeResult(cart=account_cart)
        if guest_cart is None or not guest_cart.items:
            return result

        for line in list(guest_cart.items):
            product_id = str(line.product_id)
            try:
                self.add_item(account_cart, product_id, line.quantity)
            except (InsufficientStock, ProductNotFound) as exc:
                reason = "insufficient_stock" if isinstance(exc, InsufficientStock) else "product_not_found"
                result.skipped.append(MergeSkip(product_id=product_id, quantity=line.quantity, reason=reason))
                logger.info(
                    "Guest cart line skipped during merge",
                    session_id=str(session_id),
                    account_id=str(account_id),
                    product_id=product_id,
                    reason=reason,
                )
            else:
                result.merged.append(product_id)

        guest_cart.clear()
        self._carts.add(guest_cart)
        self._carts.remove(guest_cart)

        logger.info(
            "Guest cart merged",
            session_id=str(session_id),
            account_id=str(account_id),
            merged_count=len(result.merged),
            skipped_count=len(result.skipped),
        )
        return result

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    def summarize(self, cart: Cart) -> dict:
        """Render the cart with current product prices."""
        rows = []
        for line in cart.items:
            product = self._products.find(line.product_id)
            rows.append((line, product, to_decimal(product.price) if product else to_decimal(0)))

        totals = compute_totals((price, line.quantity) for line, _, price in rows)

        items = []
        for (line, product, price), subtotal in zip(rows, totals.line_subtotals):
            items.append(
                {
                    "id": str(line.id),
                    "product_id": str(line.product_id),
                    "product": (
                        {
                            "id": str(product.id),
                            "name": product.name,
                            "price": float(price),
                            "sku": product.sku,
                        }
                        if product
                        else None
                    ),
                    "quantity": line.quantity,
                    "unit_price": float(price),
                    "line_subtotal": float(subtotal),
                }
            )

        return {
            "id": str(cart.id),
            "items": items,
            "total_items": cart.total_items,
            "total_amount": float(totals.grand_total),
        }
