"""Domain events for inventory adjustments."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="InventoryAdjustmentRecord")
class InventoryAdjusted:
    """Stock was deducted on the provider and mirrored locally."""

    __version__ = 1

    record_id = Identifier(required=True)
    workspace_id = Identifier(required=True)
    product_id = Identifier(required=True)
    idempotency_key = String(required=True)
    reason = String(required=True)
    quantity = Integer(required=True)
    adjustments = Text(required=True)  # JSON: list of {locationId, newQuantity, deducted}
    remaining_shortage = Integer(required=True)
    adjusted_at = DateTime(required=True)
