"""Order number generation.

Numbers look like ``ORD-20260314-0007``: one counter per UTC calendar day,
stored as an aggregate so the increment is persisted in the same unit of
work as the order that consumes it.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer
from protean.utils.globals import current_domain

from storefront.domain import storefront


@storefront.aggregate
class OrderNumberSequence:
    last_value = Integer(default=0, min_value=0)

    def advance(self) -> int:
        self.last_value = (self.last_value or 0) + 1
        return self.last_value


def format_order_number(day: str, value: int) -> str:
    return f"ORD-{day}-{value:04d}"


def next_order_number(now: datetime | None = None) -> str:
    day = (now or datetime.now(UTC)).strftime("%Y%m%d")
    repo = current_domain.repository_for(OrderNumberSequence)
    try:
        sequence = repo.get(day)
    except ObjectNotFoundError:
        sequence = OrderNumberSequence(id=day, last_value=0)

    value = sequence.advance()
    repo.add(sequence)
    return format_order_number(day, value)
