"""Conversation aggregate — a customer thread that also carries the shopping cart.

The cart is a list of ``CartLineItem`` entities plus a denormalized
``cart_total``. The total is recomputed from the lines on every write and
guarded by a post-invariant, so it can never drift from the lines.

``cart_version`` is bumped on every cart write. Callers that read the cart
and write it back pass the version they read; a mismatch means someone else
wrote in between and the write is rejected instead of silently overwriting.
"""

import json
import math
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.cart.events import CartCheckedOut, CartItemAdded, CartItemsRemoved, ConversationStarted
from storefront.domain import storefront
from storefront.errors import EmptyCartError, StaleCartError


class InteractionType(Enum):
    SHOPPING = "shopping"
    CHECKOUT = "checkout"


@storefront.entity(part_of="Conversation")
class CartLineItem:
    """One add-to-cart call. Title and price are snapshots taken at add time."""

    product_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    variant_info = Text()
    image_url = String(max_length=1024)
    position = Integer(required=True, min_value=0)
    added_at = DateTime(required=True)

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "title": self.title,
            "price": self.price,
            "quantity": self.quantity,
            "variant_info": self.variant_info,
            "image_url": self.image_url,
            "added_at": self.added_at.isoformat() if self.added_at else None,
        }


@storefront.aggregate
class Conversation:
    workspace_id = Identifier(required=True)
    customer_phone = String(required=True, max_length=32)
    customer_name = String(max_length=255)
    cart_items = HasMany(CartLineItem)
    cart_total = Float(default=0.0)
    cart_version = Integer(default=0)
    last_interaction_type = String(max_length=50)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cart_total_must_match_lines(self):
        expected = sum(line.subtotal for line in self.cart_items or [])
        if not math.isclose(self.cart_total or 0.0, expected, abs_tol=1e-9):
            raise ValidationError({"cart_total": [f"Cart total {self.cart_total} does not match lines ({expected})"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def start(cls, workspace_id, customer_phone, customer_name=None):
        now = datetime.now(UTC)
        conversation = cls(
            workspace_id=workspace_id,
            customer_phone=customer_phone,
            customer_name=customer_name,
            cart_total=0.0,
            cart_version=0,
            created_at=now,
            updated_at=now,
        )
        conversation.raise_(
            ConversationStarted(
                conversation_id=str(conversation.id),
                workspace_id=str(workspace_id),
                customer_phone=customer_phone,
                started_at=now,
            )
        )
        return conversation

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    def lines(self) -> list[CartLineItem]:
        """Cart lines in the order they were added."""
        return sorted(self.cart_items or [], key=lambda line: line.position)

    def cart_snapshot(self) -> list[dict]:
        return [line.to_dict() for line in self.lines()]

    @property
    def cart_count(self) -> int:
        return len(self.cart_items or [])

    def belongs_to(self, workspace_id) -> bool:
        return str(self.workspace_id) == str(workspace_id)

    # -------------------------------------------------------------------
    # Cart mutations
    # -------------------------------------------------------------------
    def _ensure_version(self, expected_version):
        if expected_version is not None and expected_version != self.cart_version:
            raise StaleCartError(expected_version=expected_version, current_version=self.cart_version)

    def _recomputed_total(self) -> float:
        return sum(line.subtotal for line in self.cart_items or [])

    def add_line(self, product_id, title, price, quantity=1, variant_info=None, image_url=None, expected_version=None):
        """Append a new cart line. Lines for the same product are never merged."""
        self._ensure_version(expected_version)
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

        now = datetime.now(UTC)
        next_position = max((line.position for line in self.cart_items or []), default=-1) + 1
        line = CartLineItem(
            product_id=product_id,
            title=title,
            price=price,
            quantity=quantity,
            variant_info=variant_info,
            image_url=image_url,
            position=next_position,
            added_at=now,
        )

        with atomic_change(self):
            self.add_cart_items(line)
            self.cart_total = self._recomputed_total()
            self.cart_version = (self.cart_version or 0) + 1
            self.last_interaction_type = InteractionType.SHOPPING.value
            self.updated_at = now

        self.raise_(
            CartItemAdded(
                conversation_id=str(self.id),
                workspace_id=str(self.workspace_id),
                product_id=str(product_id),
                quantity=quantity,
                price=price,
                cart_total=self.cart_total,
                cart_version=self.cart_version,
            )
        )
        return line

    def remove_product(self, product_id, expected_version=None) -> int:
        """Remove every line for ``product_id``; returns how many were removed."""
        self._ensure_version(expected_version)

        matching = [line for line in self.cart_items or [] if str(line.product_id) == str(product_id)]
        with atomic_change(self):
            for line in matching:
                self.remove_cart_items(line)
            self.cart_total = self._recomputed_total()
            self.cart_version = (self.cart_version or 0) + 1
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemsRemoved(
                conversation_id=str(self.id),
                workspace_id=str(self.workspace_id),
                product_id=str(product_id),
                removed_count=len(matching),
                cart_total=self.cart_total,
                cart_version=self.cart_version,
            )
        )
        return len(matching)

    def clear_for_checkout(self, order_id) -> None:
        if not self.cart_items:
            raise EmptyCartError()

        snapshot = self.cart_snapshot()
        total = self.cart_total
        with atomic_change(self):
            for line in list(self.cart_items):
                self.remove_cart_items(line)
            self.cart_total = 0.0
            self.cart_version = (self.cart_version or 0) + 1
            self.last_interaction_type = InteractionType.CHECKOUT.value
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCheckedOut(
                conversation_id=str(self.id),
                workspace_id=str(self.workspace_id),
                order_id=str(order_id),
                items=json.dumps(snapshot),
                cart_total=total,
            )
        )
