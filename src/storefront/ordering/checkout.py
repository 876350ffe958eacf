"""Checkout — converts a conversation's cart into an Order with a payment link.

Drawing the order number, creating the order, issuing the payment link and
clearing the cart all happen in this one handler, so they are committed by a
single unit of work: either the order exists and the cart is empty, or
neither write happened.
"""

from datetime import UTC, datetime, timedelta

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.cart.conversation import Conversation
from storefront.cart.view import load_conversation
from storefront.domain import logger, storefront
from storefront.errors import EmptyCartError
from storefront.ordering.numbering import next_order_number
from storefront.ordering.order import Order
from storefront.ordering.payment_links import get_link_provider
from storefront.settings import load_settings


@storefront.command(part_of="Order")
class Checkout:
    workspace_id = Identifier(required=True)
    conversation_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        settings = load_settings()

        conversation = load_conversation(command.workspace_id, command.conversation_id)
        if not conversation.cart_items:
            raise EmptyCartError()

        order_number = next_order_number()
        total = conversation.cart_total
        order = Order.place(
            workspace_id=str(conversation.workspace_id),
            conversation_id=str(conversation.id),
            order_number=order_number,
            items=conversation.cart_snapshot(),
            total=total,
            customer_phone=conversation.customer_phone,
            customer_name=conversation.customer_name,
            currency=settings.currency,
        )

        expires_at = datetime.now(UTC) + timedelta(hours=settings.payment_link_ttl_hours)
        link = get_link_provider().create_link(
            order_id=str(order.id),
            order_number=order_number,
            amount=total,
            currency=settings.currency,
            expires_at=expires_at,
        )
        order.attach_payment_link(link.url, link.expires_at)

        conversation.clear_for_checkout(order_id=str(order.id))

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(Conversation).add(conversation)

        logger.info(
            "checkout_completed",
            conversation_id=str(conversation.id),
            order_id=str(order.id),
            order_number=order_number,
            total=total,
        )
        return {
            "success": True,
            "order_number": order_number,
            "payment_link": link.url,
            "total": total,
        }
