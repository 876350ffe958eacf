"""Order aggregate — the immutable record of a sale created at checkout.

Line items, subtotal and total are captured from the cart once and never
change afterwards; only the status and payment fields move.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront
from storefront.ordering.events import OrderPlaced, PaymentLinkIssued


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


@storefront.aggregate
class Order:
    workspace_id = Identifier(required=True)
    conversation_id = Identifier(required=True)
    customer_phone = String(max_length=32)
    customer_name = String(max_length=255)
    order_number = String(required=True, max_length=50, unique=True)
    items = Text(required=True)  # JSON: list of cart line dicts
    subtotal = Float(required=True, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="USD")
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_link_url = String(max_length=1024)
    payment_link_expires_at = DateTime()
    tracking_number = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items or not json.loads(self.items):
            raise ValidationError({"items": ["An order must contain at least one item"]})

    @classmethod
    def place(
        cls,
        workspace_id,
        conversation_id,
        order_number,
        items,
        total,
        customer_phone=None,
        customer_name=None,
        currency="USD",
    ):
        """Create an order from a cart snapshot. Subtotal and total are both the cart total."""
        now = datetime.now(UTC)
        items_json = json.dumps(items)
        order = cls(
            workspace_id=workspace_id,
            conversation_id=conversation_id,
            customer_phone=customer_phone,
            customer_name=customer_name,
            order_number=order_number,
            items=items_json,
            subtotal=total,
            total=total,
            currency=currency,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                workspace_id=str(workspace_id),
                conversation_id=str(conversation_id),
                order_number=order_number,
                items=items_json,
                total=total,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    def item_list(self) -> list[dict]:
        return json.loads(self.items) if self.items else []

    def attach_payment_link(self, url, expires_at) -> None:
        if self.payment_link_url:
            raise ValidationError({"payment_link_url": ["Order already has a payment link"]})

        self.payment_link_url = url
        self.payment_link_expires_at = expires_at
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentLinkIssued(
                order_id=str(self.id),
                payment_link_url=url,
                expires_at=expires_at,
            )
        )

    def status_summary(self) -> dict:
        return {
            "order_number": self.order_number,
            "status": self.status,
            "payment_status": self.payment_status,
            "total": self.total,
            "tracking_number": self.tracking_number or None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
