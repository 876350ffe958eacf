"""Cart reads — conversation loading scoped to a workspace, and the view-cart query."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.conversation import Conversation
from storefront.errors import NotFoundError


def load_conversation(workspace_id, conversation_id) -> Conversation:
    """Fetch a conversation, treating a workspace mismatch the same as absence."""
    try:
        conversation = current_domain.repository_for(Conversation).get(str(conversation_id))
    except ObjectNotFoundError:
        raise NotFoundError("Conversation not found") from None

    if not conversation.belongs_to(workspace_id):
        raise NotFoundError("Conversation not found")
    return conversation


def view_cart(workspace_id, conversation_id) -> dict:
    conversation = load_conversation(workspace_id, conversation_id)
    return {
        "items": conversation.cart_snapshot(),
        "total": conversation.cart_total or 0,
        "count": conversation.cart_count,
        "cart_version": conversation.cart_version or 0,
    }
