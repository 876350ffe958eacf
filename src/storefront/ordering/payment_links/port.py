"""Payment link provider port (abstract interface).

Checkout asks the provider for a hosted payment page for the new order.
Swapping the adapter (fake for dev/test, a real PSP in production) needs no
change in the checkout handler.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PaymentLink:
    url: str
    expires_at: datetime


class PaymentLinkProvider(ABC):
    @abstractmethod
    def create_link(
        self,
        order_id: str,
        order_number: str,
        amount: float,
        currency: str,
        expires_at: datetime,
    ) -> PaymentLink:
        """Create a payment link valid until ``expires_at``.

        Raises ``UpstreamError`` when the provider rejects the request.
        """
        ...
