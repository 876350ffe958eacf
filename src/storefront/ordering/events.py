"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out into a new order."""

    __version__ = 1

    order_id = Identifier(required=True)
    workspace_id = Identifier(required=True)
    conversation_id = Identifier(required=True)
    order_number = String(required=True)
    items = Text(required=True)  # JSON: snapshot of the cart lines
    total = Float(required=True)
    currency = String(max_length=3, required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentLinkIssued:
    """A payment link was generated for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_link_url = String(required=True, max_length=1024)
    expires_at = DateTime(required=True)
