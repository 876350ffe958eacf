"""Configurable fake inventory provider for development and testing.

Keeps the last quantity written per (item, location) and can be told to fail
on a given call, so partial-failure handling can be exercised.
"""

from storefront.errors import UpstreamError
from storefront.inventory.provider.port import AdjustmentReason, InventoryProvider, ProviderConnection


class FakeInventoryProvider(InventoryProvider):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.fail_on_call: int | None = None
        self.failure_reason: str = "Inventory provider unavailable"
        self.calls: list[dict] = []
        self.on_hand: dict[tuple[str, str], int] = {}

    def configure(
        self,
        should_succeed: bool = True,
        fail_on_call: int | None = None,
        failure_reason: str = "Inventory provider unavailable",
    ) -> None:
        """``fail_on_call`` is 1-based; earlier calls still succeed."""
        self.should_succeed = should_succeed
        self.fail_on_call = fail_on_call
        self.failure_reason = failure_reason

    def set_on_hand(
        self,
        connection: ProviderConnection,
        inventory_item_id: str,
        location_id: str,
        quantity: int,
        reason: AdjustmentReason,
    ) -> None:
        self.calls.append(
            {
                "method": "set_on_hand",
                "shop_domain": connection.shop_domain,
                "inventory_item_id": inventory_item_id,
                "location_id": location_id,
                "quantity": quantity,
                "reason": reason.value,
            }
        )
        if not self.should_succeed or self.fail_on_call == len(self.calls):
            raise UpstreamError(self.failure_reason)

        self.on_hand[(inventory_item_id, location_id)] = quantity
