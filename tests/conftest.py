"""
Shared fixtures for unit and integration tests.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable

import pytest

from hotel_pricing.schemas.rates import RoomType
from hotel_pricing.schemas.reservations import ReservationRecord

DAY0 = date(2025, 7, 1)


@pytest.fixture
def make_record() -> Callable[..., ReservationRecord]:
    """
    Factory for reservation records with sensible defaults.

    Defaults to a 2-night SINGLE stay starting on DAY0.
    """

    def _make(reservation_id: int = 1, **overrides: Any) -> ReservationRecord:
        fields: dict[str, Any] = {
            "reservation_id": reservation_id,
            "guest_id": 100 + reservation_id,
            "room_id": 200 + reservation_id,
            "room_type": RoomType.SINGLE,
            "checkin_date": DAY0,
            "checkout_date": date(2025, 7, 3),
            "guest_name": f"Guest {reservation_id}",
            "room_number": f"{100 + reservation_id}",
        }
        fields.update(overrides)
        return ReservationRecord(**fields)

    return _make
