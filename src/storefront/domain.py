"""Storefront bounded context — catalogue lookup, conversation carts, checkout and inventory.

Shoppers talk to a business over WhatsApp. Each conversation carries a cart;
checkout turns the cart into an Order with a payment link, and inventory
adjustments push sold quantities back to the merchant's Shopify locations.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
