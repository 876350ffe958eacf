"""Stock allocation across provider locations.

The only strategy is first-fit: walk the locations in ascending location-id
order and take as much as each one has until the demand is met. There is no
preference for a primary location and no attempt to touch fewer locations.
Demand that no location can cover is reported as a shortage, not rejected.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LocationDeduction:
    location_id: str
    previous_quantity: int
    deducted: int

    @property
    def new_quantity(self) -> int:
        return self.previous_quantity - self.deducted


@dataclass(frozen=True)
class AllocationPlan:
    requested: int
    deductions: tuple[LocationDeduction, ...]

    @property
    def allocated(self) -> int:
        return sum(d.deducted for d in self.deductions)

    @property
    def shortage(self) -> int:
        return self.requested - self.allocated


def first_fit(quantities: dict[str, int], demand: int) -> AllocationPlan:
    """Plan deductions for ``demand`` units over ``{location_id: on_hand}``."""
    remaining = demand
    deductions = []

    for location_id in sorted(quantities):
        if remaining <= 0:
            break
        available = quantities[location_id]
        if available <= 0:
            continue

        take = min(available, remaining)
        deductions.append(LocationDeduction(location_id=location_id, previous_quantity=available, deducted=take))
        remaining -= take

    return AllocationPlan(requested=demand, deductions=tuple(deductions))
