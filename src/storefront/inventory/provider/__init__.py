"""Inventory provider factory.

get_inventory_provider() / set_inventory_provider() swap implementations.
Production talks to Shopify; every other environment gets the fake unless
INVENTORY_PROVIDER says otherwise.
"""

from storefront.inventory.provider.fake_adapter import FakeInventoryProvider
from storefront.inventory.provider.port import InventoryProvider
from storefront.inventory.provider.shopify_adapter import ShopifyInventoryProvider
from storefront.settings import load_settings

_current_provider: InventoryProvider | None = None


def get_inventory_provider() -> InventoryProvider:
    global _current_provider
    if _current_provider is None:
        settings = load_settings()
        if settings.inventory_provider == "shopify":
            _current_provider = ShopifyInventoryProvider(
                api_version=settings.shopify_api_version,
                timeout=settings.shopify_timeout_seconds,
            )
        else:
            _current_provider = FakeInventoryProvider()
    return _current_provider


def set_inventory_provider(provider: InventoryProvider) -> None:
    """Override the active provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_inventory_provider() -> None:
    global _current_provider
    _current_provider = None
