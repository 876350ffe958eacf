"""Tests for the Product aggregate."""

import json

import pytest
from protean.exceptions import ValidationError

from storefront.catalogue.product import Product, ProductStatus


def _make_product(**overrides):
    defaults = {"workspace_id": "ws-001", "title": "Linen Shirt", "price": 25.0, "stock": 4}
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_defaults_to_active(self):
        product = _make_product()
        assert product.status == ProductStatus.ACTIVE.value
        assert product.created_at is not None

    def test_tags_and_embedding_are_stored_as_json(self):
        product = _make_product(tags=["summer", "linen"], embedding=[0.1, 0.2])
        assert json.loads(product.tags) == ["summer", "linen"]
        assert product.tag_list() == ["summer", "linen"]
        assert product.embedding_vector() == [0.1, 0.2]

    def test_missing_optional_json_fields(self):
        product = _make_product()
        assert product.tag_list() == []
        assert product.embedding_vector() is None
        assert product.location_quantities() == {}

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(stock=-1)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price=-5.0)


class TestSellability:
    def test_active_with_stock_is_sellable(self):
        assert _make_product().is_sellable

    def test_out_of_stock_is_not_sellable(self):
        assert not _make_product(stock=0).is_sellable

    def test_draft_is_not_sellable(self):
        assert not _make_product(status=ProductStatus.DRAFT.value).is_sellable


class TestProviderLink:
    def test_unlinked_by_default(self):
        assert not _make_product().is_provider_linked

    def test_needs_both_source_and_inventory_item(self):
        assert not _make_product(shopify_inventory_item_id="4411").is_provider_linked
        assert _make_product(catalog_source_id="src-001", shopify_inventory_item_id="4411").is_provider_linked


class TestLocationQuantities:
    def test_reads_quantities(self):
        product = _make_product(inventory_by_location={"loc-b": {"quantity": 2}, "loc-a": {"quantity": 3}})
        assert product.location_quantities() == {"loc-b": 2, "loc-a": 3}

    def test_set_quantities_mirrors_stock(self):
        product = _make_product(
            stock=5,
            inventory_by_location={"loc-a": {"quantity": 3, "name": "Warehouse"}, "loc-b": {"quantity": 2}},
        )
        product.set_location_quantities({"loc-a": 0, "loc-b": 1})

        assert product.location_quantities() == {"loc-a": 0, "loc-b": 1}
        assert product.stock == 1

    def test_set_quantities_keeps_other_location_data(self):
        product = _make_product(inventory_by_location={"loc-a": {"quantity": 3, "name": "Warehouse"}})
        product.set_location_quantities({"loc-a": 1})
        assert json.loads(product.inventory_by_location)["loc-a"] == {"quantity": 1, "name": "Warehouse"}


class TestSummary:
    def test_summary_fields(self):
        product = _make_product(sku="SKU-1", category="shirts", tags=["linen"])
        summary = product.to_summary()
        assert summary["id"] == str(product.id)
        assert summary["title"] == "Linen Shirt"
        assert summary["price"] == 25.0
        assert summary["tags"] == ["linen"]
