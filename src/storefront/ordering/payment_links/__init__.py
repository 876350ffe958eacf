"""Payment link provider factory.

get_link_provider() / set_link_provider() swap implementations; the fake
provider is the default.
"""

from storefront.ordering.payment_links.fake_adapter import FakePaymentLinks
from storefront.ordering.payment_links.port import PaymentLinkProvider
from storefront.settings import load_settings

_current_provider: PaymentLinkProvider | None = None


def get_link_provider() -> PaymentLinkProvider:
    """Return the current payment link provider. Defaults to FakePaymentLinks."""
    global _current_provider
    if _current_provider is None:
        _current_provider = FakePaymentLinks(base_url=load_settings().payment_link_base_url)
    return _current_provider


def set_link_provider(provider: PaymentLinkProvider) -> None:
    """Override the active provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_link_provider() -> None:
    """Reset to the default provider."""
    global _current_provider
    _current_provider = None
