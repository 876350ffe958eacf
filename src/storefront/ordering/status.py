"""Order status lookup for the customer of a conversation."""

from protean.utils.globals import current_domain

from storefront.cart.view import load_conversation
from storefront.errors import NotFoundError
from storefront.ordering.order import Order


def check_order_status(workspace_id, conversation_id, order_number: str | None = None) -> dict:
    """Latest order placed by the conversation's customer, or the one with ``order_number``."""
    conversation = load_conversation(workspace_id, conversation_id)

    filters = {"workspace_id": str(workspace_id), "customer_phone": conversation.customer_phone}
    if order_number:
        filters["order_number"] = order_number

    orders = current_domain.repository_for(Order)._dao.query.filter(**filters).all().items
    if not orders:
        raise NotFoundError("No orders found")

    latest = max(orders, key=lambda o: o.created_at.timestamp() if o.created_at else 0.0)
    return latest.status_summary()
