"""Totals for carts and orders.

Amounts are computed with ``Decimal``. Unit prices are used at their stored
two-decimal value, line subtotals are left unrounded, and only the grand
total is rounded (half-up) to the currency's minor unit.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_decimal(amount) -> Decimal:
    """Convert a stored amount (float, int, str, or Decimal) without binary float noise."""
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def round_money(amount) -> Decimal:
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    line_subtotals: tuple[Decimal, ...]
    grand_total: Decimal


def compute_totals(lines: Iterable[tuple[object, int]]) -> Totals:
    """Compute per-line subtotals and the rounded grand total.

    Args:
        lines: ``(unit_price, quantity)`` pairs.
    """
    subtotals = tuple(to_decimal(unit_price) * quantity for unit_price, quantity in lines)
    return Totals(
        line_subtotals=subtotals,
        grand_total=round_money(sum(subtotals, Decimal("0"))),
    )
