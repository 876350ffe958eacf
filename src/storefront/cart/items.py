"""Cart item management — commands and handler.

A cart write is a compare-and-set on the conversation aggregate: Protean
commits it only if the stored aggregate version still matches the one the
handler loaded, and retries the handler on a fresh read otherwise. The retry
re-checks ``expected_cart_version``, so a caller working from an old cart gets
``StaleCartError`` instead of silently overwriting a concurrent write.
"""

from protean import handle
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.cart.conversation import Conversation
from storefront.cart.view import load_conversation
from storefront.catalogue.lookup import get_sellable_product
from storefront.domain import logger, storefront
from storefront.errors import InsufficientStockError, StaleCartError


@storefront.command(part_of="Conversation")
class AddToCart:
    workspace_id = Identifier(required=True)
    conversation_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)
    variant_info = Text()
    expected_cart_version = Integer()


@storefront.command(part_of="Conversation")
class RemoveFromCart:
    workspace_id = Identifier(required=True)
    conversation_id = Identifier(required=True)
    product_id = Identifier(required=True)
    expected_cart_version = Integer()


@storefront.command_handler(part_of=Conversation)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        conversation = load_conversation(command.workspace_id, command.conversation_id)
        product = get_sellable_product(command.workspace_id, command.product_id)

        quantity = command.quantity or 1
        if (product.stock or 0) < quantity:
            logger.info(
                "cart_add_rejected_insufficient_stock",
                conversation_id=str(conversation.id),
                product_id=str(product.id),
                requested=quantity,
                available=product.stock,
            )
            raise InsufficientStockError(available=product.stock or 0, requested=quantity)

        line = conversation.add_line(
            product_id=str(product.id),
            title=product.title,
            price=product.price,
            quantity=quantity,
            variant_info=command.variant_info,
            image_url=product.image_url,
            expected_version=command.expected_cart_version,
        )
        current_domain.repository_for(Conversation).add(conversation)

        logger.info(
            "cart_item_added",
            conversation_id=str(conversation.id),
            product_id=str(product.id),
            quantity=quantity,
            cart_total=conversation.cart_total,
        )
        return {
            "success": True,
            "cart_count": conversation.cart_count,
            "cart_total": conversation.cart_total,
            "added_item": line.to_dict(),
            "cart_version": conversation.cart_version,
        }

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        conversation = load_conversation(command.workspace_id, command.conversation_id)
        removed = conversation.remove_product(
            command.product_id,
            expected_version=command.expected_cart_version,
        )
        current_domain.repository_for(Conversation).add(conversation)

        logger.info(
            "cart_items_removed",
            conversation_id=str(conversation.id),
            product_id=str(command.product_id),
            removed=removed,
            cart_total=conversation.cart_total,
        )
        return {
            "success": True,
            "cart_count": conversation.cart_count,
            "cart_total": conversation.cart_total,
            "cart_version": conversation.cart_version,
        }


def process_cart_command(command) -> dict:
    """Run a cart command, reporting a write conflict that outlasts the retries as a stale cart."""
    try:
        return current_domain.process(command, asynchronous=False)
    except ExpectedVersionError as exc:
        current = load_conversation(command.workspace_id, command.conversation_id)
        logger.info(
            "cart_write_conflicted",
            conversation_id=str(command.conversation_id),
            expected_version=command.expected_cart_version,
            current_version=current.cart_version,
        )
        raise StaleCartError(
            expected_version=command.expected_cart_version,
            current_version=current.cart_version or 0,
        ) from exc
