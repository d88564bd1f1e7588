"""Cart item management: commands and handler.

Every command names its owner with ``account_id`` or ``session_id`` (exactly
one). The handler resolves that owner's cart, delegates to the CartStore,
and returns the cart summary.
"""

from protean import handle
from protean.fields import Identifier, Integer, String

from commerce import engine
from commerce.cart.cart import Cart
from commerce.cart.owner import owner_key
from commerce.domain import commerce


@commerce.command(part_of="Cart")
class AddToCart:
    account_id = Identifier()
    session_id = String(max_length=255)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="Cart")
class UpdateCartItem:
    account_id = Identifier()
    session_id = String(max_length=255)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="Cart")
class RemoveFromCart:
    account_id = Identifier()
    session_id = String(max_length=255)
    item_id = Identifier(required=True)


@commerce.command(part_of="Cart")
class ClearCart:
    account_id = Identifier()
    session_id = String(max_length=255)


def _owner_of(command):
    return owner_key(account_id=command.account_id, session_id=command.session_id)


@commerce.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        store = engine.cart_store()
        cart = store.resolve_cart(_owner_of(command))
        store.add_item(cart, command.product_id, command.quantity)
        return store.summarize(cart)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        store = engine.cart_store()
        cart = store.resolve_cart(_owner_of(command))
        store.update_item(cart, command.item_id, command.quantity)
        return store.summarize(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        store = engine.cart_store()
        cart = store.resolve_cart(_owner_of(command))
        store.remove_item(cart, command.item_id)
        return store.summarize(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        store = engine.cart_store()
        cart = store.resolve_cart(_owner_of(command))
        store.clear(cart)
        return store.summarize(cart)
