"""Shopify Admin GraphQL adapter for the inventory provider port."""

import requests

from storefront.domain import logger
from storefront.errors import UpstreamError
from storefront.inventory.provider.port import AdjustmentReason, InventoryProvider, ProviderConnection

SET_ON_HAND_MUTATION = """
mutation inventorySetOnHandQuantities($input: InventorySetOnHandQuantitiesInput!) {
  inventorySetOnHandQuantities(input: $input) {
    userErrors {
      field
      message
    }
  }
}
"""

# Shopify only accepts its own reason codes.
SHOPIFY_REASONS = {
    AdjustmentReason.SALE: "other",
    AdjustmentReason.RESERVATION: "reservation_created",
    AdjustmentReason.RETURN: "restock",
    AdjustmentReason.CORRECTION: "correction",
}


def to_gid(resource: str, identifier: str) -> str:
    identifier = str(identifier)
    if identifier.startswith("gid://"):
        return identifier
    return f"gid://shopify/{resource}/{identifier}"


def _joined(errors) -> str:
    """GraphQL error entries are usually ``{"message": ...}`` dicts, but not always."""
    if isinstance(errors, (str, dict)):
        errors = [errors]
    return "; ".join(
        str(error.get("message", error)) if isinstance(error, dict) else str(error) for error in errors
    )


class ShopifyInventoryProvider(InventoryProvider):
    def __init__(
        self,
        api_version: str = "2024-10",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or requests.Session()

    def endpoint(self, shop_domain: str) -> str:
        return f"https://{shop_domain}/admin/api/{self.api_version}/graphql.json"

    def set_on_hand(
        self,
        connection: ProviderConnection,
        inventory_item_id: str,
        location_id: str,
        quantity: int,
        reason: AdjustmentReason,
    ) -> None:
        payload = {
            "query": SET_ON_HAND_MUTATION,
            "variables": {
                "input": {
                    "reason": SHOPIFY_REASONS[reason],
                    "setQuantities": [
                        {
                            "inventoryItemId": to_gid("InventoryItem", inventory_item_id),
                            "locationId": to_gid("Location", location_id),
                            "quantity": quantity,
                        }
                    ],
                }
            },
        }
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": connection.access_token,
        }

        try:
            response = self.session.post(
                self.endpoint(connection.shop_domain),
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("shopify_request_failed", shop_domain=connection.shop_domain, error=str(exc))
            raise UpstreamError(f"Shopify request failed: {exc}") from exc

        if response.status_code >= 400:
            raise UpstreamError(f"Shopify returned HTTP {response.status_code}: {response.text[:200]}")

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError(f"Shopify returned a non-JSON response: {response.text[:200]}") from exc
        if not isinstance(body, dict):
            raise UpstreamError(f"Shopify returned an unexpected response: {str(body)[:200]}")

        if body.get("errors"):
            raise UpstreamError(f"Shopify GraphQL error: {_joined(body['errors'])}")

        result = (body.get("data") or {}).get("inventorySetOnHandQuantities") or {}
        user_errors = result.get("userErrors") or []
        if user_errors:
            raise UpstreamError(f"Failed to adjust Shopify inventory: {_joined(user_errors)}")
