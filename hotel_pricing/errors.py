"""
Error taxonomy for the pricing engine.

Every error raised by the registry, ledger, pricing engine and flow controller
derives from HotelPricingError so callers that process a batch can catch the
whole family in one place. A rate cache miss is deliberately not part of this
module: lookups return the Miss value instead of raising.
"""

from __future__ import annotations

from datetime import date
from typing import Any


class HotelPricingError(Exception):
    """Base class for all pricing engine errors."""


class NotFound(HotelPricingError, KeyError):
    """A reservation id is absent from the registry or already tombstoned."""

    def __init__(self, reservation_id: Any):
        self.reservation_id = reservation_id
        super().__init__(f"Reservation {reservation_id} not found")

    def __str__(self) -> str:
        # KeyError.__str__ would wrap the message in quotes
        return str(self.args[0])


class DuplicateKey(HotelPricingError):
    """The id is already held by the registry, live or tombstoned."""

    def __init__(self, reservation_id: Any, tombstoned: bool = False):
        self.reservation_id = reservation_id
        self.tombstoned = tombstoned
        state = "was deleted earlier in this run" if tombstoned else "already exists"
        super().__init__(f"Reservation {reservation_id} {state}")


class CapacityExceeded(HotelPricingError):
    """A service ledger is full."""

    def __init__(self, capacity: int, reservation_id: Any = None):
        self.capacity = capacity
        self.reservation_id = reservation_id
        target = f" for reservation {reservation_id}" if reservation_id is not None else ""
        super().__init__(f"Service ledger capacity of {capacity} exceeded{target}")


class InvalidDateRange(HotelPricingError, ValueError):
    """Checkout is not strictly after check-in."""

    def __init__(self, reservation_id: Any, checkin_date: date, checkout_date: date):
        self.reservation_id = reservation_id
        self.checkin_date = checkin_date
        self.checkout_date = checkout_date
        super().__init__(
            f"Reservation {reservation_id} has invalid date range "
            f"{checkin_date.isoformat()} -> {checkout_date.isoformat()}"
        )


class RateUnavailable(HotelPricingError):
    """No rate is cached for the room type on the lookup date."""

    def __init__(self, reservation_id: Any, room_type: str, rate_date: date):
        self.reservation_id = reservation_id
        self.room_type = room_type
        self.rate_date = rate_date
        super().__init__(
            f"No {room_type} rate available on {rate_date.isoformat()} "
            f"for reservation {reservation_id}"
        )


class BatchRejected(HotelPricingError):
    """A bulk insert contained invalid records and nothing was committed."""

    def __init__(self, problems: list[HotelPricingError]):
        self.problems = problems
        super().__init__(
            f"Batch rejected with {len(problems)} problem(s): "
            + "; ".join(str(p) for p in problems)
        )


class FlowStateError(HotelPricingError):
    """A flow controller was driven from a state that does not allow it."""
