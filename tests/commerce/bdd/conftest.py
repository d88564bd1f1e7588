"""Shared BDD fixtures and step definitions for the commerce engine."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from commerce import engine
from commerce.cart.cart import Cart
from commerce.cart.owner import AccountOwner, SessionOwner
from commerce.product.product import Product


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalog():
    """Products created by the scenario, keyed by their short name."""
    return {}


@pytest.fixture()
def error():
    """Container for capturing errors in When steps."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_catalog(catalog, name, price, stock):
    product = Product.create(name=name, sku=f"SKU-{name}", price=price, stock=stock)
    current_domain.repository_for(Product).add(product)
    catalog[name] = product


@given(parsers.cfparse('the account "{account_id}" has {qty:d} of "{name}" in the cart'))
def account_cart_line(catalog, account_id, qty, name):
    store = engine.cart_store()
    cart = store.resolve_cart(AccountOwner(account_id=account_id))
    store.add_item(cart, catalog[name].id, qty)


@given(parsers.cfparse('the guest "{session_id}" has {qty:d} of "{name}" in the cart'))
def guest_cart_line(catalog, session_id, qty, name):
    store = engine.cart_store()
    cart = store.resolve_cart(SessionOwner(session_id=session_id))
    store.add_item(cart, catalog[name].id, qty)


@given(parsers.cfparse('the stock of "{name}" drops to {stock:d}'))
def stock_drops(catalog, name, stock):
    repo = current_domain.repository_for(Product)
    product = repo.get(catalog[name].id)
    product.withdraw_stock(product.stock - stock)
    repo.add(product)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the cart holds {qty:d} of "{name}"'))
def cart_holds(catalog, qty, name):
    cart = current_domain.repository_for(Cart).find_for_owner(AccountOwner(account_id="acct-1"))
    line = cart.line_for(catalog[name].id)
    assert line is not None
    assert line.quantity == qty


@then(parsers.cfparse('the stock of "{name}" is {stock:d}'))
def stock_is(catalog, name, stock):
    assert current_domain.repository_for(Product).get(catalog[name].id).stock == stock
