"""Fixed-capacity, insertion-ordered list of services billed to one reservation."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterator, Optional

from hotel_pricing.config import SERVICE_LEDGER_CAPACITY
from hotel_pricing.errors import CapacityExceeded
from hotel_pricing.schemas.services import ServiceItem


class ServiceLedger:
    """
    Bounded service list for a single reservation.

    Appending to a full ledger raises CapacityExceeded; the ledger never
    truncates or grows past its capacity. Items cannot be removed.

    Attributes:
        capacity: Maximum number of service items
        reservation_id: Owning reservation, used in error messages
    """

    def __init__(
        self, capacity: int = SERVICE_LEDGER_CAPACITY, reservation_id: Optional[Any] = None
    ):
        if capacity < 1:
            raise ValueError("Ledger capacity must be at least 1")
        self.capacity = capacity
        self.reservation_id = reservation_id
        self._items: list[ServiceItem] = []

    def append(self, item: ServiceItem) -> None:
        """
        Add a service item at the end of the ledger.

        Raises:
            CapacityExceeded: If the ledger already holds `capacity` items
        """
        if len(self._items) >= self.capacity:
            raise CapacityExceeded(self.capacity, self.reservation_id)
        self._items.append(item)

    def total_cost(self) -> Decimal:
        """Sum of unit_price * quantity over all items, 0 when empty."""
        return sum((item.cost for item in self._items), Decimal("0"))

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def __iter__(self) -> Iterator[ServiceItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
