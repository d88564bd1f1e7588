"""Tests for Decimal totals and half-up rounding."""

from decimal import Decimal

from commerce.pricing import compute_totals, round_money, to_decimal


class TestToDecimal:
    def test_float_converted_without_binary_noise(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_decimal_passes_through(self):
        value = Decimal("3.14")
        assert to_decimal(value) is value


class TestRoundMoney:
    def test_half_rounds_up(self):
        assert round_money("2.345") == Decimal("2.35")

    def test_below_half_rounds_down(self):
        assert round_money("2.344") == Decimal("2.34")

    def test_whole_amount_gets_two_places(self):
        assert str(round_money(7)) == "7.00"


class TestComputeTotals:
    def test_line_subtotals_and_grand_total(self):
        totals = compute_totals([(10.00, 2), (5.50, 1)])
        assert totals.line_subtotals == (Decimal("20.0"), Decimal("5.5"))
        assert totals.grand_total == Decimal("25.50")

    def test_float_prices_sum_exactly(self):
        totals = compute_totals([(0.1, 1), (0.2, 1)])
        assert totals.grand_total == Decimal("0.30")

    def test_only_grand_total_is_rounded(self):
        totals = compute_totals([("0.005", 1), ("0.005", 1)])
        assert totals.line_subtotals == (Decimal("0.005"), Decimal("0.005"))
        assert totals.grand_total == Decimal("0.01")

    def test_no_lines(self):
        totals = compute_totals([])
        assert totals.line_subtotals == ()
        assert totals.grand_total == Decimal("0.00")
