"""Order assembler: turns requested lines into a priced, stock-backed order.

Order creation runs in two passes:

1. Check phase: every line is looked up and checked against current stock,
   cumulatively per product. Nothing is written; any failure aborts.
2. Commit phase: the PENDING order is persisted with its frozen total, then
   each line's stock is reserved. If a reservation loses a race, the
   reservations already made are released, the order is deleted, and
   ``ConcurrencyConflict`` is raised. Line items are recorded only after
   every reservation succeeded.
"""

from collections.abc import Iterable

import structlog

from commerce.errors import (
    ConcurrencyConflict,
    InsufficientStock,
    InvalidInput,
    InvalidOrder,
    InvalidStatusTransition,
    OrderNotFound,
    PersistenceFailure,
    ProductNotFound,
)
from commerce.inventory.ledger import require_positive_quantity
from commerce.order.order import Order, OrderStatus
from commerce.pricing import compute_totals

logger = structlog.get_logger(__name__)


def _normalize_lines(requested_items) -> list[tuple[str, int]]:
    lines = []
    for item in requested_items:
        if isinstance(item, dict):
            product_id, quantity = item.get("product_id"), item.get("quantity")
        else:
            product_id, quantity = item
        require_positive_quantity(quantity)
        lines.append((str(product_id), quantity))
    return lines


def _parse_status(status) -> OrderStatus:
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus(status)
    except ValueError as exc:
        raise InvalidInput("status", f"Unknown order status {status!r}") from exc


class OrderAssembler:
    def __init__(self, orders, products, ledger):
        self._orders = orders
        self._products = products
        self._ledger = ledger

    # -------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------
    def create_order(self, account_id, requested_items: Iterable) -> Order:
        """Create a PENDING order for ``account_id``.

        Args:
            account_id: The authenticated account placing the order.
            requested_items: ``(product_id, quantity)`` pairs or dicts with
                ``product_id`` and ``quantity`` keys.

        Raises:
            InvalidOrder / InvalidQuantity: malformed request.
            ProductNotFound / InsufficientStock: check phase failed; nothing changed.
            ConcurrencyConflict: stock moved between the check and commit phases;
                all reservations were released and the order deleted.
        """
        lines = _normalize_lines(requested_items or [])
        if not lines:
            raise InvalidOrder()

        priced = self._check(lines)
        totals = compute_totals((line["unit_price"], line["quantity"]) for line in priced)

        order = Order.create(account_id=str(account_id), total_amount=float(totals.grand_total))
        self._orders.add(order)

        reserved: list[tuple[str, int]] = []
        try:
            for line in priced:
                try:
                    self._ledger.reserve(line["product_id"], line["quantity"])
                except (InsufficientStock, ProductNotFound) as exc:
                    raise ConcurrencyConflict(line["product_id"], line["quantity"]) from exc
                reserved.append((line["product_id"], line["quantity"]))

            order.record_items(priced)
            self._orders.add(order)
        except Exception as exc:
            self._compensate(order, reserved, exc)
            raise

        logger.info(
            "Order placed",
            order_id=str(order.id),
            account_id=str(account_id),
            item_count=len(priced),
            total_amount=order.total_amount,
        )
        return order

    def _check(self, lines: list[tuple[str, int]]) -> list[dict]:
        """Validate every line against current stock without writing anything."""
        priced = []
        requested_so_far: dict[str, int] = {}
        for product_id, quantity in lines:
            product = self._products.find(product_id)
            if product is None:
                raise ProductNotFound(product_id)

            cumulative = requested_so_far.get(product_id, 0) + quantity
            self._ledger.check_availability(product_id, cumulative).raise_for_status()
            requested_so_far[product_id] = cumulative

            priced.append(
                {
                    "product_id": product_id,
                    "sku": product.sku,
                    "name": product.name,
                    "quantity": quantity,
                    "unit_price": product.price,
                }
            )
        return priced

    def _compensate(self, order: Order, reserved: list[tuple[str, int]], cause: Exception) -> None:
        logger.warning(
            "Order creation failed after check phase, compensating",
            order_id=str(order.id),
            reserved_count=len(reserved),
            error=str(cause),
        )
        try:
            for product_id, quantity in reversed(reserved):
                self._ledger.release(product_id, quantity)
            self._orders.remove(order)
        except Exception as exc:
            logger.error(
                "Compensation failed",
                order_id=str(order.id),
                error=str(exc),
            )
            raise PersistenceFailure(f"Could not undo partially created order {order.id}") from exc

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find_by_account(self, account_id) -> list[Order]:
        return self._orders.find_by_account(account_id)

    def find_by_id(self, order_id) -> Order:
        order = self._orders.find(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    # -------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------
    def update_status(self, order_id, status) -> Order:
        """Move an order to ``status`` (an OrderStatus or its value)."""
        target = _parse_status(status)
        if target == OrderStatus.CANCELLED:
            return self.cancel(order_id)

        order = self.find_by_id(order_id)
        if target != OrderStatus.PAID:
            raise InvalidStatusTransition(order.status, target.value)

        order.mark_paid()
        self._orders.add(order)
        logger.info("Order paid", order_id=str(order.id))
        return order

    def cancel(self, order_id, reason=None) -> Order:
        """Cancel a PENDING order and return its stock to inventory."""
        order = self.find_by_id(order_id)
        order.cancel(reason=reason)
        self._orders.add(order)

        for item in order.items:
            try:
                self._ledger.release(str(item.product_id), item.quantity)
            except ProductNotFound:
                # Stock of a product removed from the catalogue has nowhere to go
                logger.warning(
                    "Stock not released, product no longer exists",
                    order_id=str(order.id),
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                )

        logger.info("Order cancelled", order_id=str(order.id), reason=reason)
        return order
