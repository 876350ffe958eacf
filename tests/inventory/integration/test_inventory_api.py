"""Integration tests for the inventory adjustment endpoint via TestClient."""

from unittest import mock
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.exceptions import ExpectedVersionError

from storefront.api import register_exception_handlers, router
from storefront.inventory.provider import set_inventory_provider
from storefront.inventory.provider.shopify_adapter import ShopifyInventoryProvider


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app, headers={"x-tool-secret": "test-tool-secret"})


def _adjust(client, product_id, quantity=1, reason="sale", key="key-1"):
    return client.post(
        "/shopify-adjust-inventory",
        json={
            "workspaceId": "ws-001",
            "productId": product_id,
            "quantity": quantity,
            "reason": reason,
            "idempotencyKey": key,
        },
    )


class TestAdjustInventoryEndpoint:
    def test_adjusts_across_locations(self, client, linked_product, fake_provider):
        product = linked_product()

        response = _adjust(client, str(product.id), quantity=4)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "adjustments": [
                {"locationId": "loc-a", "newQuantity": 0, "deducted": 3},
                {"locationId": "loc-b", "newQuantity": 1, "deducted": 1},
            ],
            "remainingShortage": 0,
        }

    def test_replay_reports_already_processed(self, client, linked_product, fake_provider):
        product = linked_product()
        _adjust(client, str(product.id), quantity=1)

        response = _adjust(client, str(product.id), quantity=1)

        assert response.status_code == 200
        assert response.json() == {"success": True, "alreadyProcessed": True}
        assert len(fake_provider.calls) == 1

    def test_shortage_is_not_an_error(self, client, linked_product, fake_provider):
        product = linked_product()
        response = _adjust(client, str(product.id), quantity=9)
        assert response.status_code == 200
        assert response.json()["remainingShortage"] == 4

    def test_provider_failure_is_upstream_error(self, client, linked_product, fake_provider):
        product = linked_product()
        fake_provider.configure(should_succeed=False, failure_reason="Shopify unavailable")

        response = _adjust(client, str(product.id))

        assert response.status_code == 502
        assert response.json() == {"error": "Shopify unavailable", "kind": "upstream"}

    def test_non_json_shopify_reply_is_upstream_error(self, client, linked_product):
        reply = MagicMock(status_code=200, text="<html>Service Unavailable</html>")
        reply.json.side_effect = ValueError("Expecting value")
        session = MagicMock()
        session.post.return_value = reply
        set_inventory_provider(ShopifyInventoryProvider(api_version="2024-10", timeout=5, session=session))
        product = linked_product()

        response = _adjust(client, str(product.id))

        assert response.status_code == 502
        assert response.json()["kind"] == "upstream"

    def test_product_changed_at_commit_is_conflict(self, client, linked_product, fake_provider):
        product = linked_product()

        with mock.patch("storefront.api.routes.adjust_inventory", side_effect=ExpectedVersionError("version mismatch")):
            response = _adjust(client, str(product.id))

        assert response.status_code == 409
        assert response.json() == {"error": "Resource was modified by another request", "kind": "conflict"}

    def test_unlinked_product(self, client, make_product, fake_provider):
        product = make_product()
        response = _adjust(client, str(product.id))
        assert response.status_code == 400
        assert response.json() == {"error": "Product not linked to Shopify", "kind": "state_conflict"}

    def test_unknown_product(self, client, fake_provider):
        response = _adjust(client, "missing-product")
        assert response.status_code == 404

    def test_unknown_reason(self, client, linked_product, fake_provider):
        response = _adjust(client, str(linked_product().id), reason="theft")
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"

    def test_missing_idempotency_key(self, client, linked_product, fake_provider):
        product = linked_product()
        response = client.post(
            "/shopify-adjust-inventory",
            json={"workspaceId": "ws-001", "productId": str(product.id), "quantity": 1, "reason": "sale"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required parameters"
