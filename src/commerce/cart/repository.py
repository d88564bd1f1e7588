"""Repository for the Cart aggregate."""

from commerce.cart.cart import Cart
from commerce.cart.owner import AccountOwner, OwnerKey
from commerce.domain import commerce


@commerce.repository(part_of=Cart)
class CartRepository:
    def find_for_owner(self, owner: OwnerKey) -> Cart | None:
        """Find the cart keyed by exactly this owner."""
        if isinstance(owner, AccountOwner):
            carts = self._dao.query.filter(account_id=owner.account_id).all().items
        else:
            carts = self._dao.query.filter(session_id=owner.session_id).all().items
        return self.get(carts[0].id) if carts else None

    def remove(self, cart: Cart) -> None:
        self._dao.delete(cart)
