"""Pending order expiry: cancels orders that were never paid.

Designed to be triggered periodically by an external scheduler (cron, K8s
CronJob) via the maintenance API endpoint. Each stale PENDING order is
cancelled through the assembler, which returns its stock to inventory.
A failure on one order is logged and the sweep moves on.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_MINUTES = 30


def _naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        return moment.astimezone(UTC).replace(tzinfo=None)
    return moment


class PendingOrderExpiry:
    def __init__(self, orders, assembler, timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES):
        self._orders = orders
        self._assembler = assembler
        self._timeout_minutes = timeout_minutes

    def run(self, older_than_minutes: int | None = None, as_of: datetime | None = None) -> int:
        """Cancel PENDING orders created before the cutoff. Returns how many were cancelled."""
        as_of = as_of or datetime.now(UTC)
        threshold_minutes = self._timeout_minutes if older_than_minutes is None else older_than_minutes
        cutoff = _naive_utc(as_of - timedelta(minutes=threshold_minutes))

        logger.info(
            "Checking for stale pending orders",
            cutoff=cutoff.isoformat(),
            threshold_minutes=threshold_minutes,
        )

        stale = [
            order
            for order in self._orders.find_pending()
            if order.created_at and _naive_utc(order.created_at) <= cutoff
        ]
        if not stale:
            logger.info("No stale pending orders found")
            return 0

        expired_count = 0
        for order in stale:
            try:
                self._assembler.cancel(str(order.id), reason="timeout")
                expired_count += 1
                logger.info(
                    "Cancelled stale pending order",
                    order_id=str(order.id),
                    created_at=str(order.created_at),
                )
            except (ValidationError, ObjectNotFoundError) as exc:
                logger.warning(
                    "Failed to cancel stale pending order",
                    order_id=str(order.id),
                    error=str(exc),
                )

        logger.info("Stale pending order cleanup complete", expired_count=expired_count)
        return expired_count
