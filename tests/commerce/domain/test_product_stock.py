"""Tests for Product stock movements and repricing."""

import pytest
from protean.exceptions import ValidationError

from commerce.product.events import ProductRepriced, StockRestored, StockWithdrawn
from commerce.product.product import Product


def _product(**overrides):
    defaults = {"name": "Mug", "sku": "MUG-001", "price": 12.5, "stock": 5}
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_create_sets_fields(self):
        product = _product()
        assert product.name == "Mug"
        assert product.sku == "MUG-001"
        assert product.price == 12.5
        assert product.stock == 5

    def test_price_is_rounded_to_cents(self):
        product = _product(price=9.999)
        assert product.price == 10.0

    def test_stock_defaults_to_zero(self):
        product = Product.create(name="Mug", sku="MUG-001", price=1.0)
        assert product.stock == 0

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            _product(stock=-1)


class TestWithdrawStock:
    def test_withdraw_reduces_stock(self):
        product = _product(stock=5)
        product.withdraw_stock(2)
        assert product.stock == 3

    def test_withdraw_everything(self):
        product = _product(stock=5)
        product.withdraw_stock(5)
        assert product.stock == 0

    def test_withdraw_more_than_on_hand_rejected(self):
        product = _product(stock=2)
        with pytest.raises(ValidationError) as exc_info:
            product.withdraw_stock(3)
        assert "quantity" in exc_info.value.messages
        assert product.stock == 2

    def test_withdraw_zero_rejected(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.withdraw_stock(0)

    def test_withdraw_raises_event(self):
        product = _product(stock=5)
        product._events.clear()
        product.withdraw_stock(2)

        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, StockWithdrawn)
        assert event.previous_stock == 5
        assert event.new_stock == 3
        assert event.quantity == 2


class TestRestoreStock:
    def test_restore_increases_stock(self):
        product = _product(stock=1)
        product.restore_stock(4)
        assert product.stock == 5

    def test_restore_negative_rejected(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.restore_stock(-1)

    def test_restore_raises_event(self):
        product = _product(stock=1)
        product._events.clear()
        product.restore_stock(4)

        event = product._events[0]
        assert isinstance(event, StockRestored)
        assert event.new_stock == 5


class TestReprice:
    def test_reprice_changes_price(self):
        product = _product(price=10.0)
        product.reprice(12.0)
        assert product.price == 12.0

    def test_reprice_raises_event(self):
        product = _product(price=10.0)
        product._events.clear()
        product.reprice(8.25)

        event = product._events[0]
        assert isinstance(event, ProductRepriced)
        assert event.previous_price == 10.0
        assert event.new_price == 8.25

    def test_negative_price_rejected(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.reprice(-1)
