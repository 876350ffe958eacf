"""Domain events for the Conversation aggregate's cart."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Conversation")
class ConversationStarted:
    """A customer contacted the workspace for the first time."""

    __version__ = 1

    conversation_id = Identifier(required=True)
    workspace_id = Identifier(required=True)
    customer_phone = String(required=True)
    started_at = DateTime(required=True)


@storefront.event(part_of="Conversation")
class CartItemAdded:
    """A product line was appended to the conversation's cart."""

    __version__ = 1

    conversation_id = Identifier(required=True)
    workspace_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    price = Float(required=True)
    cart_total = Float(required=True)
    cart_version = Integer(required=True)


@storefront.event(part_of="Conversation")
class CartItemsRemoved:
    """Every cart line for a product was removed."""

    __version__ = 1

    conversation_id = Identifier(required=True)
    workspace_id = Identifier(required=True)
    product_id = Identifier(required=True)
    removed_count = Integer(required=True)
    cart_total = Float(required=True)
    cart_version = Integer(required=True)


@storefront.event(part_of="Conversation")
class CartCheckedOut:
    """The cart was turned into an order and emptied."""

    __version__ = 1

    conversation_id = Identifier(required=True)
    workspace_id = Identifier(required=True)
    order_id = Identifier(required=True)
    items = Text(required=True)  # JSON: snapshot of the cart lines
    cart_total = Float(required=True)
