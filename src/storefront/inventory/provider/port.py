"""Inventory provider port (abstract interface).

The adjuster pushes absolute on-hand quantities per location to the
merchant's catalog provider. Absolute writes make a retry after a partial
failure safe: setting the same quantity twice is a no-op.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class AdjustmentReason(Enum):
    SALE = "sale"
    RESERVATION = "reservation"
    RETURN = "return"
    CORRECTION = "correction"


@dataclass(frozen=True)
class ProviderConnection:
    shop_domain: str
    access_token: str


class InventoryProvider(ABC):
    @abstractmethod
    def set_on_hand(
        self,
        connection: ProviderConnection,
        inventory_item_id: str,
        location_id: str,
        quantity: int,
        reason: AdjustmentReason,
    ) -> None:
        """Set the on-hand quantity of one item at one location.

        Raises ``UpstreamError`` carrying the provider's message on failure.
        """
        ...
