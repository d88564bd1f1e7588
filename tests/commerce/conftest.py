import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def commerce_bed():
    from commerce.domain import commerce
    from commerce.utils.db import drop_db, setup_db

    bed = DomainFixture(commerce)
    bed.setup()
    setup_db(commerce)
    yield bed
    drop_db(commerce)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(commerce_bed):
    with commerce_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Catalogue fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    """Factory that persists a product and returns it."""
    from protean import current_domain

    from commerce.product.product import Product

    counter = {"n": 0}

    def _make(name=None, price=10.0, stock=10, sku=None):
        counter["n"] += 1
        product = Product.create(
            name=name or f"Product {counter['n']}",
            sku=sku or f"SKU-{counter['n']:03d}",
            price=price,
            stock=stock,
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def product_p(make_product):
    """Product P: price 10.00, stock 3."""
    return make_product(name="Product P", sku="SKU-P", price=10.00, stock=3)


@pytest.fixture()
def product_q(make_product):
    """Product Q: price 5.50, stock 10."""
    return make_product(name="Product Q", sku="SKU-Q", price=5.50, stock=10)


@pytest.fixture()
def stock_of():
    """Read a product's current stock from the repository."""
    from protean import current_domain

    from commerce.product.product import Product

    def _stock(product) -> int:
        product_id = getattr(product, "id", product)
        return current_domain.repository_for(Product).get(product_id).stock

    return _stock
