"""Repository for the Product aggregate, including the conditional stock primitives.

Stock writes are version-checked: a product read at version N can only be
saved while the stored copy is still at version N. A writer that lost the
race re-reads and re-checks, up to ``STOCK_WRITE_ATTEMPTS`` times, and then
gives up with ``ConcurrencyConflict``. Stock is never written from a stale
read, whichever process made the competing write.
"""

import threading

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError

from commerce.domain import commerce
from commerce.errors import ConcurrencyConflict
from commerce.product.product import Product

logger = structlog.get_logger(__name__)

STOCK_WRITE_ATTEMPTS = 5

# Queues writers within one process so they rarely collide on the version
# check. Writers in other processes are only stopped by the version check.
_local_writers = threading.Lock()


@commerce.repository(part_of=Product)
class ProductRepository:
    def find(self, product_id) -> Product | None:
        """Return the product, or None when it does not exist."""
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            return None

    def find_by_sku(self, sku: str) -> Product | None:
        products = self._dao.query.filter(sku=sku).all().items
        return self.get(products[0].id) if products else None

    def decrement_stock(self, product_id, quantity: int) -> int | None:
        """Conditionally take ``quantity`` units out of stock.

        Returns the new stock count, or None when fewer than ``quantity``
        units remain (nothing is written in that case).

        Raises:
            ObjectNotFoundError: the product does not exist.
            ConcurrencyConflict: every attempt lost to a concurrent writer.
        """
        with _local_writers:
            for attempt in range(1, STOCK_WRITE_ATTEMPTS + 1):
                product = self.get(product_id)
                if product.stock < quantity:
                    return None

                product.withdraw_stock(quantity)
                try:
                    self.add(product)
                except ExpectedVersionError:
                    logger.info(
                        "Stock write lost to a concurrent writer",
                        product_id=str(product_id),
                        attempt=attempt,
                    )
                    continue
                return product.stock

        raise ConcurrencyConflict(product_id, quantity)

    def increment_stock(self, product_id, quantity: int) -> int:
        """Put ``quantity`` units back.

        Raises:
            ObjectNotFoundError: the product does not exist.
            ConcurrencyConflict: every attempt lost to a concurrent writer.
        """
        with _local_writers:
            for attempt in range(1, STOCK_WRITE_ATTEMPTS + 1):
                product = self.get(product_id)
                product.restore_stock(quantity)
                try:
                    self.add(product)
                except ExpectedVersionError:
                    logger.info(
                        "Stock write lost to a concurrent writer",
                        product_id=str(product_id),
                        attempt=attempt,
                    )
                    continue
                return product.stock

        raise ConcurrencyConflict(product_id, quantity)
