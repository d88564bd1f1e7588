"""Guest cart merging: command and handler.

Run when a guest signs in: the session cart's lines move into the account
cart, best effort, and the session cart is deleted.
"""

from protean import handle
from protean.fields import Identifier, String

from commerce import engine
from commerce.cart.cart import Cart
from commerce.domain import commerce


@commerce.command(part_of="Cart")
class MergeGuestCart:
    session_id = String(required=True, max_length=255)
    account_id = Identifier(required=True)


@commerce.command_handler(part_of=Cart)
class MergeGuestCartHandler:
    @handle(MergeGuestCart)
    def merge_guest_cart(self, command):
        store = engine.cart_store()
        result = store.merge_guest_into_account(
            session_id=command.session_id,
            account_id=command.account_id,
        )
        return {
            "cart": store.summarize(result.cart),
            "merged": result.merged,
            "skipped": [
                {"product_id": skip.product_id, "quantity": skip.quantity, "reason": skip.reason}
                for skip in result.skipped
            ],
        }
