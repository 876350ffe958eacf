import pytest
from protean import current_domain

from storefront.catalogue.product import CatalogSource
from storefront.inventory.provider import set_inventory_provider
from storefront.inventory.provider.fake_adapter import FakeInventoryProvider


@pytest.fixture()
def fake_provider():
    provider = FakeInventoryProvider()
    set_inventory_provider(provider)
    return provider


@pytest.fixture()
def catalog_source(_ctx):
    source = CatalogSource(workspace_id="ws-001", shop_domain="acme.myshopify.com", access_token="shpat_test")
    current_domain.repository_for(CatalogSource).add(source)
    return source


@pytest.fixture()
def linked_product(make_product, catalog_source):
    """A Shopify-linked product stocked at two locations (3 + 2)."""

    def _make(locations=None, **fields):
        locations = locations if locations is not None else {"loc-a": 3, "loc-b": 2}
        return make_product(
            stock=sum(locations.values()),
            catalog_source_id=str(catalog_source.id),
            shopify_product_id="8801",
            shopify_inventory_item_id="4411",
            inventory_by_location={loc: {"quantity": qty} for loc, qty in locations.items()},
            **fields,
        )

    return _make
