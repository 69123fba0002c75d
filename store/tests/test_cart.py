import pytest
from django.contrib.sessions.backends.signed_cookies import SessionStore

from store.cart import CART_SESSION_KEY, Cart
from store.exceptions import ConflictError


@pytest.fixture
def session():
    return SessionStore()


@pytest.fixture
def cart(session):
    return Cart(session)


def test_add_merges_and_clamps_to_stock(cart, make_product):
    product = make_product(stock=5)
    cart.add(product, 3)
    cart.add(product, 4)
    assert len(cart) == 1
    assert cart.lines[str(product.pk)]["quantity"] == 5


def test_add_out_of_stock_product_rejected(cart, make_product):
    with pytest.raises(ConflictError):
        cart.add(make_product(stock=0))
    assert len(cart) == 0


def test_update_quantity_clamps_between_one_and_stock(cart, make_product):
    product = make_product(stock=4)
    cart.add(product, 2)
    assert cart.update_quantity(product.pk, 10)["quantity"] == 4
    assert cart.update_quantity(product.pk, 0)["quantity"] == 1
    assert cart.update_quantity(999, 2) is None


def test_totals_only_count_selected_lines(cart, make_product):
    ring = make_product(name="Ring", price=300)
    lamp = make_product(name="Lamp", price=500)
    cart.add(ring, 2)
    cart.add(lamp, 1)
    assert cart.count == 3
    assert cart.total == 1100

    cart.toggle_selected(lamp.pk)
    assert cart.count == 2
    assert cart.total == 600
    assert [line["productId"] for line in cart.selected_items] == [ring.pk]
    assert cart.summary().delivery_charge == 499


def test_remove_selected_keeps_unselected(cart, make_product):
    ring = make_product(name="Ring")
    lamp = make_product(name="Lamp")
    cart.add(ring)
    cart.add(lamp)
    cart.toggle_selected(lamp.pk)
    cart.remove_selected()
    assert lamp.pk in cart
    assert ring.pk not in cart


def test_remove_and_clear(cart, make_product):
    ring = make_product(name="Ring")
    lamp = make_product(name="Lamp")
    cart.add(ring)
    cart.add(lamp)
    cart.remove(ring.pk)
    assert len(cart) == 1
    cart.clear()
    assert len(cart) == 0
    assert cart.total == 0


def test_state_is_persisted_in_session(session, make_product):
    product = make_product(price=300)
    Cart(session).add(product, 2)
    assert session.modified
    assert session[CART_SESSION_KEY][str(product.pk)]["quantity"] == 2

    reloaded = Cart(session)
    assert reloaded.total == 600
    assert reloaded.order_items() == [{"productId": product.pk, "quantity": 2}]


def test_readding_a_deselected_line_selects_it(cart, product):
    cart.add(product)
    cart.toggle_selected(product.pk)
    assert cart.count == 0
    cart.add(product)
    assert cart.count == 2
