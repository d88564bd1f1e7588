"""Application tests for version-checked stock writes.

A second writer (another worker process, say) commits between this
writer's read and its save. The stale save must be rejected and retried
from a fresh read, never applied.
"""

import pytest
from protean import current_domain

from commerce.errors import ConcurrencyConflict, InsufficientStock
from commerce.inventory.ledger import InventoryLedger
from commerce.product.product import Product
from commerce.product.repository import STOCK_WRITE_ATTEMPTS


@pytest.fixture()
def products():
    return current_domain.repository_for(Product)


def _interleave_writer(monkeypatch, products, withdraw=0, restore=0, times=1):
    """After each of the next ``times`` reads, commit a competing stock change."""
    original_get = products.get
    remaining = {"writes": times}

    def get_then_compete(product_id):
        product = original_get(product_id)
        if remaining["writes"] > 0:
            remaining["writes"] -= 1
            competitor = original_get(product_id)
            if withdraw:
                competitor.withdraw_stock(withdraw)
            if restore:
                competitor.restore_stock(restore)
            products.add(competitor)
        return product

    monkeypatch.setattr(products, "get", get_then_compete)


class TestReserveAgainstStaleRead:
    def test_recheck_finds_too_little_stock(self, monkeypatch, products, make_product, stock_of):
        product = make_product(stock=5)
        _interleave_writer(monkeypatch, products, withdraw=3)

        with pytest.raises(InsufficientStock) as exc_info:
            InventoryLedger(products).reserve(product.id, 3)

        assert exc_info.value.available == 2
        assert stock_of(product) == 2

    def test_retry_succeeds_when_stock_remains(self, monkeypatch, products, make_product, stock_of):
        product = make_product(stock=5)
        _interleave_writer(monkeypatch, products, withdraw=3)

        remaining = InventoryLedger(products).reserve(product.id, 1)

        assert remaining == 1
        assert stock_of(product) == 1

    def test_gives_up_after_repeated_losses(self, monkeypatch, products, make_product, stock_of):
        product = make_product(stock=50)
        _interleave_writer(monkeypatch, products, withdraw=1, times=STOCK_WRITE_ATTEMPTS)

        with pytest.raises(ConcurrencyConflict) as exc_info:
            InventoryLedger(products).reserve(product.id, 1)

        assert exc_info.value.product_id == str(product.id)
        # Only the competing writes landed
        assert stock_of(product) == 50 - STOCK_WRITE_ATTEMPTS


class TestReleaseAgainstStaleRead:
    def test_release_is_not_lost(self, monkeypatch, products, make_product, stock_of):
        product = make_product(stock=5)
        _interleave_writer(monkeypatch, products, withdraw=2)

        restored = InventoryLedger(products).release(product.id, 4)

        assert restored == 7
        assert stock_of(product) == 7

    def test_concurrent_releases_both_count(self, monkeypatch, products, make_product, stock_of):
        product = make_product(stock=0)
        _interleave_writer(monkeypatch, products, restore=3)

        InventoryLedger(products).release(product.id, 2)

        assert stock_of(product) == 5
