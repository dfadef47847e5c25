"""
Integration fixtures: an in-memory SQLite property database with seed data.

Seed layout (as of 2025-07-01):

- rooms: 101 SINGLE (OCCUPIED), 102 DOUBLE (OCCUPIED), 103 SUITE, 104 SINGLE
- rates: SINGLE 25 from 2025-01-01 then 30 from 2025-06-01 (and 35 from
  2025-08-01, not yet in effect); DOUBLE 50 from 2025-01-01; no SUITE rate
- reservations:
    1: SINGLE, 2 nights, breakfast x2 + parking -> 60 + 15 + 10 = 85
    2: DOUBLE, 3 nights, no services -> 150
    3: SUITE, 1 night -> no rate, unpriced
    4: SINGLE, CANCELLED
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterator

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from hotel_pricing.models.base import Base
from hotel_pricing.models.guests import Guest
from hotel_pricing.models.rates import Rate
from hotel_pricing.models.reservations import Reservation
from hotel_pricing.models.rooms import Room
from hotel_pricing.models.services import ReservationService, Service

AS_OF = date(2025, 7, 1)


@pytest.fixture
def engine() -> Iterator[Engine]:
    """Fresh in-memory database with all tables created."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded_engine(engine: Engine) -> Engine:
    with engine.begin() as conn:
        conn.execute(
            insert(Guest),
            [
                {"guest_id": 1, "name": "Ada Lovelace", "email": "ada@example.com"},
                {"guest_id": 2, "name": "Alan Turing", "email": None},
            ],
        )
        conn.execute(
            insert(Room),
            [
                {"room_id": 1, "room_number": "101", "room_type": "SINGLE", "status": "OCCUPIED"},
                {"room_id": 2, "room_number": "102", "room_type": "DOUBLE", "status": "OCCUPIED"},
                {"room_id": 3, "room_number": "103", "room_type": "SUITE", "status": "AVAILABLE"},
                {"room_id": 4, "room_number": "104", "room_type": "SINGLE", "status": "MAINTENANCE"},
            ],
        )
        conn.execute(
            insert(Rate),
            [
                {"room_type": "SINGLE", "effective_date": date(2025, 1, 1), "price": Decimal("25")},
                {"room_type": "SINGLE", "effective_date": date(2025, 6, 1), "price": Decimal("30")},
                {"room_type": "SINGLE", "effective_date": date(2025, 8, 1), "price": Decimal("35")},
                {"room_type": "DOUBLE", "effective_date": date(2025, 1, 1), "price": Decimal("50")},
            ],
        )
        conn.execute(
            insert(Service),
            [
                {"service_id": 1, "name": "Breakfast", "unit_price": Decimal("7.50")},
                {"service_id": 2, "name": "Parking", "unit_price": Decimal("10")},
            ],
        )
        conn.execute(
            insert(Reservation),
            [
                {
                    "reservation_id": 1,
                    "guest_id": 1,
                    "room_id": 1,
                    "checkin_date": date(2025, 7, 1),
                    "checkout_date": date(2025, 7, 3),
                    "status": "PENDING",
                },
                {
                    "reservation_id": 2,
                    "guest_id": 2,
                    "room_id": 2,
                    "checkin_date": date(2025, 7, 1),
                    "checkout_date": date(2025, 7, 4),
                    "status": "CONFIRMED",
                },
                {
                    "reservation_id": 3,
                    "guest_id": 1,
                    "room_id": 3,
                    "checkin_date": date(2025, 7, 5),
                    "checkout_date": date(2025, 7, 6),
                    "status": "PENDING",
                },
                {
                    "reservation_id": 4,
                    "guest_id": 2,
                    "room_id": 4,
                    "checkin_date": date(2025, 7, 2),
                    "checkout_date": date(2025, 7, 4),
                    "status": "CANCELLED",
                },
            ],
        )
        conn.execute(
            insert(ReservationService),
            [
                {"id": 1, "reservation_id": 1, "service_id": 1, "quantity": 2},
                {"id": 2, "reservation_id": 1, "service_id": 2, "quantity": 1},
                {"id": 3, "reservation_id": 4, "service_id": 2, "quantity": 3},
            ],
        )
    return engine
