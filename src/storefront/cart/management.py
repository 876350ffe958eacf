"""Conversation management — command and handler.

Conversations are opened when a customer first writes to the workspace's
WhatsApp number; the cart starts out empty.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.conversation import Conversation
from storefront.domain import storefront


@storefront.command(part_of="Conversation")
class StartConversation:
    workspace_id = Identifier(required=True)
    customer_phone = String(required=True, max_length=32)
    customer_name = String(max_length=255)


@storefront.command_handler(part_of=Conversation)
class ManageConversationHandler:
    @handle(StartConversation)
    def start_conversation(self, command):
        conversation = Conversation.start(
            workspace_id=command.workspace_id,
            customer_phone=command.customer_phone,
            customer_name=command.customer_name,
        )
        current_domain.repository_for(Conversation).add(conversation)
        return str(conversation.id)
