"""Shared BDD fixtures and step definitions for the conversation cart."""

import pytest
from pytest_bdd import given, parsers

from storefront.cart.view import view_cart


@pytest.fixture()
def shop():
    """Scenario state: the conversation id, products by title and the last error."""
    return {"conversation_id": None, "products": {}, "error": None}


@given(parsers.cfparse('a conversation in workspace "{workspace}"'))
def conversation(shop, start_conversation, workspace):
    shop["workspace_id"] = workspace
    shop["conversation_id"] = start_conversation(workspace_id=workspace)


@given(parsers.cfparse('a product "{title}" priced {price:f} with stock {stock:d}'))
def product(shop, make_product, title, price, stock):
    shop["products"][title] = make_product(title=title, price=price, stock=stock, workspace_id=shop["workspace_id"])


@pytest.fixture()
def cart(shop):
    def _read():
        return view_cart(shop["workspace_id"], shop["conversation_id"])

    return _read
