"""BDD tests for cart item management."""

import pytest
from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

from storefront.cart.items import AddToCart, RemoveFromCart
from storefront.errors import InsufficientStockError

scenarios("features/cart_items.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the shopper adds {quantity:d} of "{title}"'))
def add_item(shop, quantity, title):
    try:
        current_domain.process(
            AddToCart(
                workspace_id=shop["workspace_id"],
                conversation_id=shop["conversation_id"],
                product_id=str(shop["products"][title].id),
                quantity=quantity,
            ),
            asynchronous=False,
        )
    except InsufficientStockError as exc:
        shop["error"] = exc


@when(parsers.cfparse('the shopper removes "{title}"'))
def remove_item(shop, title):
    current_domain.process(
        RemoveFromCart(
            workspace_id=shop["workspace_id"],
            conversation_id=shop["conversation_id"],
            product_id=str(shop["products"][title].id),
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_one_line(cart, count):
    assert cart()["count"] == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_lines(cart, count):
    assert cart()["count"] == count


@then(parsers.cfparse("the cart total is {total:f}"))
def cart_total_is(cart, total):
    assert cart()["total"] == pytest.approx(total)


@then("the request is rejected for insufficient stock")
def rejected_for_stock(shop):
    assert isinstance(shop["error"], InsufficientStockError)
