"""Wiring for the commerce engine.

The engine classes take their repositories as constructor arguments. These
factories pull the repositories out of the active domain context and are the
only place that does so.
"""

from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.cart.store import CartStore
from commerce.inventory.ledger import InventoryLedger
from commerce.order.assembler import OrderAssembler
from commerce.order.checkout import Checkout
from commerce.order.expiry import DEFAULT_TIMEOUT_MINUTES, PendingOrderExpiry
from commerce.order.order import Order
from commerce.product.product import Product


def inventory_ledger() -> InventoryLedger:
    return InventoryLedger(current_domain.repository_for(Product))


def cart_store() -> CartStore:
    return CartStore(
        carts=current_domain.repository_for(Cart),
        products=current_domain.repository_for(Product),
        ledger=inventory_ledger(),
    )


def order_assembler() -> OrderAssembler:
    return OrderAssembler(
        orders=current_domain.repository_for(Order),
        products=current_domain.repository_for(Product),
        ledger=inventory_ledger(),
    )


def checkout() -> Checkout:
    return Checkout(cart_store=cart_store(), assembler=order_assembler())


def pending_order_expiry() -> PendingOrderExpiry:
    custom = current_domain.config.get("custom", {}) or {}
    timeout = custom.get("PENDING_ORDER_TIMEOUT_MINUTES", DEFAULT_TIMEOUT_MINUTES)
    return PendingOrderExpiry(
        orders=current_domain.repository_for(Order),
        assembler=order_assembler(),
        timeout_minutes=int(timeout),
    )
