"""Configurable fake payment link provider for development and testing.

Produces Stripe test-mode style URLs without any network call. It can be
switched to fail so the checkout's failure path can be exercised.
"""

from datetime import datetime

from storefront.errors import UpstreamError
from storefront.ordering.payment_links.port import PaymentLink, PaymentLinkProvider


class FakePaymentLinks(PaymentLinkProvider):
    def __init__(self, base_url: str = "https://pay.stripe.com") -> None:
        self.base_url = base_url.rstrip("/")
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment provider unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment provider unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_link(
        self,
        order_id: str,
        order_number: str,
        amount: float,
        currency: str,
        expires_at: datetime,
    ) -> PaymentLink:
        self.calls.append(
            {
                "method": "create_link",
                "order_id": order_id,
                "order_number": order_number,
                "amount": amount,
                "currency": currency,
                "expires_at": expires_at,
            }
        )
        if not self.should_succeed:
            raise UpstreamError(self.failure_reason)

        return PaymentLink(url=f"{self.base_url}/test-link-{order_id}", expires_at=expires_at)
