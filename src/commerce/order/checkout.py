"""Checkout: place an order from an account's cart, then empty the cart."""

from commerce.cart.owner import AccountOwner
from commerce.errors import InvalidOrder
from commerce.order.order import Order


class Checkout:
    def __init__(self, cart_store, assembler):
        self._cart_store = cart_store
        self._assembler = assembler

    def checkout(self, account_id) -> Order:
        cart = self._cart_store.resolve_cart(AccountOwner(account_id=str(account_id)))
        if not cart.items:
            raise InvalidOrder("Cannot check out an empty cart")

        order = self._assembler.create_order(
            account_id,
            [(str(item.product_id), item.quantity) for item in cart.items],
        )
        # The cart is only emptied once the order exists; a failed order leaves it intact.
        self._cart_store.clear(cart)
        return order
