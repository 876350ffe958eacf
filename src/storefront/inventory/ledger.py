"""Idempotency ledger for inventory adjustments.

One record per (workspace, product, idempotency key). The record is written
as a ``pending`` claim in its own committed unit of work *before* any provider
call, and flipped to ``applied`` together with the local stock update. The
unique ``token`` column is the insert-if-absent: whichever caller commits the
claim first owns the adjustment, across processes.

``claim()`` additionally serialises callers within one process, so a second
request for the same token is turned away before it touches the store.
"""

import json
import threading
from contextlib import contextmanager
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import AdjustmentInProgressError
from storefront.inventory.events import InventoryAdjusted


class LedgerAction(Enum):
    INVENTORY_ADJUST = "inventory_adjust"


class LedgerStatus(Enum):
    PENDING = "pending"
    APPLIED = "applied"


@storefront.aggregate
class InventoryAdjustmentRecord:
    workspace_id = Identifier(required=True)
    action = String(choices=LedgerAction, default=LedgerAction.INVENTORY_ADJUST.value)
    target_type = String(max_length=50, default="product")
    product_id = Identifier(required=True)
    idempotency_key = String(required=True, max_length=255)
    token = String(required=True, max_length=600, unique=True)
    status = String(choices=LedgerStatus, default=LedgerStatus.PENDING.value)
    reason = String(required=True, max_length=50)
    quantity = Integer(required=True, min_value=1)
    before_state = Text()  # JSON: inventory_by_location before
    after_state = Text()  # JSON: inventory_by_location after
    adjustments = Text()  # JSON: list of {locationId, newQuantity, deducted}
    remaining_shortage = Integer(default=0, min_value=0)
    claimed_at = DateTime()
    recorded_at = DateTime()

    @classmethod
    def open(cls, workspace_id, product_id, idempotency_key, reason, quantity):
        """A pending claim on the token; nothing has been applied yet."""
        return cls(
            workspace_id=workspace_id,
            product_id=product_id,
            idempotency_key=idempotency_key,
            token=adjustment_token(workspace_id, product_id, idempotency_key),
            status=LedgerStatus.PENDING.value,
            reason=reason,
            quantity=quantity,
            claimed_at=datetime.now(UTC),
        )

    @property
    def is_applied(self) -> bool:
        return self.status == LedgerStatus.APPLIED.value

    def mark_applied(self, before_state, after_state, adjustments, remaining_shortage) -> None:
        now = datetime.now(UTC)
        self.before_state = before_state
        self.after_state = after_state
        self.adjustments = json.dumps(adjustments)
        self.remaining_shortage = remaining_shortage
        self.status = LedgerStatus.APPLIED.value
        self.recorded_at = now

        self.raise_(
            InventoryAdjusted(
                record_id=str(self.id),
                workspace_id=str(self.workspace_id),
                product_id=str(self.product_id),
                idempotency_key=self.idempotency_key,
                reason=self.reason,
                quantity=self.quantity,
                adjustments=self.adjustments,
                remaining_shortage=remaining_shortage,
                adjusted_at=now,
            )
        )


def adjustment_token(workspace_id, product_id, idempotency_key) -> str:
    return f"{workspace_id}:{product_id}:{idempotency_key}"


def find_record(workspace_id, product_id, idempotency_key) -> InventoryAdjustmentRecord | None:
    token = adjustment_token(workspace_id, product_id, idempotency_key)
    records = current_domain.repository_for(InventoryAdjustmentRecord)._dao.query.filter(token=token).all().items
    return records[0] if records else None


def release(workspace_id, product_id, idempotency_key) -> None:
    """Drop a still-pending claim so the same key can be retried."""
    record = find_record(workspace_id, product_id, idempotency_key)
    if record is None or record.is_applied:
        return
    current_domain.repository_for(InventoryAdjustmentRecord)._dao.delete(record)


_claims: set[str] = set()
_claims_lock = threading.Lock()


@contextmanager
def claim(token: str):
    """Hold ``token`` for the duration of the block; a second holder is rejected."""
    with _claims_lock:
        if token in _claims:
            raise AdjustmentInProgressError()
        _claims.add(token)
    try:
        yield
    finally:
        with _claims_lock:
            _claims.discard(token)
