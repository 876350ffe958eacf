"""Application tests for product lookup against the repository."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain

from storefront.catalogue.lookup import (
    browse_catalog,
    get_sellable_product,
    search_products,
    vector_search_products,
)
from storefront.catalogue.product import Product, ProductStatus
from storefront.errors import InvalidRequestError, NotFoundError


class TestGetSellableProduct:
    def test_returns_active_product(self, make_product, workspace_id):
        product = make_product()
        assert get_sellable_product(workspace_id, product.id).id == product.id

    def test_unknown_product(self, workspace_id):
        with pytest.raises(NotFoundError):
            get_sellable_product(workspace_id, "missing-product")

    def test_other_workspace_is_not_found(self, make_product):
        product = make_product(workspace_id="ws-other")
        with pytest.raises(NotFoundError):
            get_sellable_product("ws-001", product.id)

    def test_archived_is_not_found(self, make_product, workspace_id):
        product = make_product(status=ProductStatus.ARCHIVED.value)
        with pytest.raises(NotFoundError):
            get_sellable_product(workspace_id, product.id)

    def test_out_of_stock_is_still_returned(self, make_product, workspace_id):
        product = make_product(stock=0)
        assert get_sellable_product(workspace_id, product.id).stock == 0


class TestBrowseCatalog:
    def _age(self, product, days):
        product.created_at = datetime.now(UTC) - timedelta(days=days)
        current_domain.repository_for(Product).add(product)

    def test_newest_first(self, make_product, workspace_id):
        old = make_product(title="Old")
        new = make_product(title="New")
        self._age(old, 3)
        self._age(new, 1)

        titles = [p["title"] for p in browse_catalog(workspace_id)]
        assert titles == ["New", "Old"]

    def test_default_limit_is_five(self, make_product, workspace_id):
        for index in range(7):
            make_product(title=f"Product {index}")
        assert len(browse_catalog(workspace_id)) == 5

    def test_explicit_limit(self, make_product, workspace_id):
        for index in range(3):
            make_product(title=f"Product {index}")
        assert len(browse_catalog(workspace_id, limit=2)) == 2

    def test_skips_unsellable_products(self, make_product, workspace_id):
        make_product(title="Sold Out", stock=0)
        make_product(title="Draft", status=ProductStatus.DRAFT.value)
        make_product(title="Elsewhere", workspace_id="ws-other")
        make_product(title="Visible")

        assert [p["title"] for p in browse_catalog(workspace_id)] == ["Visible"]


class TestSearchProducts:
    def test_ranks_by_relevance(self, make_product, workspace_id):
        make_product(title="Blue Shirt")
        make_product(title="Shirt")
        make_product(title="Shirt Dress")
        make_product(title="Cap", tags=["shirt"])

        titles = [p["title"] for p in search_products(workspace_id, "shirt")]
        assert titles == ["Shirt", "Shirt Dress", "Blue Shirt", "Cap"]

    def test_category_filter(self, make_product, workspace_id):
        make_product(title="Linen Shirt", category="shirts")
        make_product(title="Linen Trousers", category="trousers")

        titles = [p["title"] for p in search_products(workspace_id, "linen", category="trousers")]
        assert titles == ["Linen Trousers"]

    def test_price_ceiling(self, make_product, workspace_id):
        make_product(title="Cheap Shirt", price=10.0)
        make_product(title="Fancy Shirt", price=90.0)

        titles = [p["title"] for p in search_products(workspace_id, "shirt", max_price=50.0)]
        assert titles == ["Cheap Shirt"]

    def test_zero_ceiling_means_no_ceiling(self, make_product, workspace_id):
        make_product(title="Cheap Shirt", price=10.0)
        make_product(title="Fancy Shirt", price=90.0)

        titles = [p["title"] for p in search_products(workspace_id, "shirt", max_price=0)]
        assert sorted(titles) == ["Cheap Shirt", "Fancy Shirt"]

    def test_excludes_out_of_stock(self, make_product, workspace_id):
        make_product(title="Linen Shirt", stock=0)
        assert search_products(workspace_id, "linen") == []

    def test_limit(self, make_product, workspace_id):
        for index in range(4):
            make_product(title=f"Shirt {index}")
        assert len(search_products(workspace_id, "shirt", limit=2)) == 2

    def test_blank_query_rejected(self, workspace_id):
        with pytest.raises(InvalidRequestError):
            search_products(workspace_id, "  ")


class TestVectorSearch:
    @pytest.fixture(autouse=True)
    def _small_embeddings(self, monkeypatch):
        monkeypatch.setenv("EMBEDDING_DIMENSIONS", "3")

    def test_orders_by_similarity(self, make_product, workspace_id):
        make_product(title="Close", embedding=[1.0, 0.1, 0.0])
        make_product(title="Exact", embedding=[1.0, 0.0, 0.0])
        make_product(title="Far", embedding=[0.0, 1.0, 0.0])

        results = vector_search_products(workspace_id, [1.0, 0.0, 0.0])
        assert [p["title"] for p in results] == ["Exact", "Close"]
        assert results[0]["similarity"] == pytest.approx(1.0)

    def test_threshold_and_count(self, make_product, workspace_id):
        make_product(title="A", embedding=[1.0, 0.0, 0.0])
        make_product(title="B", embedding=[0.9, 0.1, 0.0])

        assert len(vector_search_products(workspace_id, [1.0, 0.0, 0.0], match_count=1)) == 1
        assert vector_search_products(workspace_id, [0.0, 0.0, 1.0], match_threshold=0.5) == []

    def test_products_without_embedding_are_skipped(self, make_product, workspace_id):
        make_product(title="No Vector")
        assert vector_search_products(workspace_id, [1.0, 0.0, 0.0]) == []

    def test_hybrid_admits_keyword_matches(self, make_product, workspace_id):
        make_product(title="Linen Shirt", embedding=[0.0, 1.0, 0.0])
        make_product(title="Wool Hat", embedding=[0.0, 0.0, 1.0])

        results = vector_search_products(
            workspace_id,
            [1.0, 0.0, 0.0],
            search_type="hybrid",
            search_query="linen",
        )
        assert [p["title"] for p in results] == ["Linen Shirt"]

    def test_wrong_dimension_rejected(self, workspace_id):
        with pytest.raises(InvalidRequestError):
            vector_search_products(workspace_id, [1.0, 0.0])

    def test_unknown_search_type_rejected(self, workspace_id):
        with pytest.raises(InvalidRequestError):
            vector_search_products(workspace_id, [1.0, 0.0, 0.0], search_type="semantic")
