"""Inventory ledger: per-product stock checks, reservations, and releases.

Availability checks are advisory reads (carts use them). Reservations and
releases go through the product repository's version-checked update, so two
callers racing for the last unit can never both succeed, even from separate
processes.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import ObjectNotFoundError

from commerce.errors import InsufficientStock, InvalidQuantity, ProductNotFound

logger = structlog.get_logger(__name__)


class Availability(Enum):
    AVAILABLE = "Available"
    INSUFFICIENT = "Insufficient"
    NOT_FOUND = "Not_Found"


@dataclass(frozen=True)
class StockCheck:
    """Outcome of an availability check for one product and quantity."""

    product_id: str
    requested: int
    status: Availability
    on_hand: int = 0

    @property
    def is_available(self) -> bool:
        return self.status == Availability.AVAILABLE

    def raise_for_status(self) -> "StockCheck":
        """Raise the matching error for a failed check; return self otherwise."""
        if self.status == Availability.NOT_FOUND:
            raise ProductNotFound(self.product_id)
        if self.status == Availability.INSUFFICIENT:
            raise InsufficientStock(self.product_id, available=self.on_hand, requested=self.requested)
        return self


def require_positive_quantity(quantity) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise InvalidQuantity(quantity)


class InventoryLedger:
    def __init__(self, products):
        self._products = products

    def check_availability(self, product_id, quantity: int) -> StockCheck:
        require_positive_quantity(quantity)

        product = self._products.find(product_id)
        if product is None:
            return StockCheck(product_id=str(product_id), requested=quantity, status=Availability.NOT_FOUND)

        status = Availability.AVAILABLE if product.stock >= quantity else Availability.INSUFFICIENT
        return StockCheck(
            product_id=str(product_id),
            requested=quantity,
            status=status,
            on_hand=product.stock,
        )

    def reserve(self, product_id, quantity: int) -> int:
        """Take ``quantity`` units out of stock. Returns the remaining stock.

        Raises InsufficientStock when too few units remain, and
        ConcurrencyConflict when concurrent writers kept winning the update.
        """
        require_positive_quantity(quantity)

        try:
            remaining = self._products.decrement_stock(product_id, quantity)
        except ObjectNotFoundError as exc:
            raise ProductNotFound(product_id) from exc

        if remaining is None:
            # Re-read only to report the shortfall; the write was refused.
            product = self._products.find(product_id)
            available = product.stock if product is not None else 0
            logger.info(
                "Reservation refused",
                product_id=str(product_id),
                requested=quantity,
                available=available,
            )
            raise InsufficientStock(product_id, available=available, requested=quantity)

        logger.debug("Stock reserved", product_id=str(product_id), quantity=quantity, remaining=remaining)
        return remaining

    def release(self, product_id, quantity: int) -> int:
        """Return ``quantity`` units to stock. Returns the new stock."""
        require_positive_quantity(quantity)

        try:
            restored = self._products.increment_stock(product_id, quantity)
        except ObjectNotFoundError as exc:
            raise ProductNotFound(product_id) from exc

        logger.debug("Stock released", product_id=str(product_id), quantity=quantity, stock=restored)
        return restored
