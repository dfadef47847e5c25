"""
Integration tests for the database readers against SQLite.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import insert

from hotel_pricing.db.readers.rates import fetch_rates_as_of
from hotel_pricing.db.readers.reservations import fetch_reservations
from hotel_pricing.db.readers.rooms import fetch_room_occupancy
from hotel_pricing.db.readers.services import fetch_service_lines
from hotel_pricing.models.rates import Rate
from hotel_pricing.models.reservations import Reservation
from hotel_pricing.models.rooms import Room
from hotel_pricing.schemas.reservations import ReservationStatus


@pytest.mark.integration
def test_fetch_rates_picks_latest_effective_row(seeded_engine) -> None:
    with seeded_engine.connect() as conn:
        entries = fetch_rates_as_of(conn, date(2025, 7, 1))

    prices = {e.room_type: e.price for e in entries}
    assert prices == {"DOUBLE": Decimal("50"), "SINGLE": Decimal("30")}
    assert all(e.effective_date == date(2025, 7, 1) for e in entries)


@pytest.mark.integration
@pytest.mark.parametrize(
    "as_of, expected",
    [
        (date(2025, 5, 31), Decimal("25")),
        (date(2025, 6, 1), Decimal("30")),
        (date(2025, 8, 1), Decimal("35")),
    ],
)
def test_fetch_rates_respects_effective_date_boundaries(seeded_engine, as_of, expected) -> None:
    with seeded_engine.connect() as conn:
        entries = fetch_rates_as_of(conn, as_of)

    single = [e for e in entries if e.room_type == "SINGLE"]
    assert [e.price for e in single] == [expected]


@pytest.mark.integration
def test_fetch_rates_before_any_rate_is_empty(seeded_engine) -> None:
    with seeded_engine.connect() as conn:
        assert fetch_rates_as_of(conn, date(2024, 12, 31)) == []


@pytest.mark.integration
def test_fetch_reservations_resolves_guest_and_room(seeded_engine) -> None:
    with seeded_engine.connect() as conn:
        records = fetch_reservations(conn)

    assert [r.reservation_id for r in records] == [1, 2, 3, 4]
    first = records[0]
    assert first.guest_name == "Ada Lovelace"
    assert first.room_number == "101"
    assert first.room_type == "SINGLE"
    assert first.nights == 2
    assert first.total_amount is None
    assert records[3].status is ReservationStatus.CANCELLED


@pytest.mark.integration
def test_fetch_service_lines_in_recorded_order(seeded_engine) -> None:
    with seeded_engine.connect() as conn:
        lines = fetch_service_lines(conn)

    assert [(rid, item.service_id, item.quantity) for rid, item in lines] == [
        (1, 1, 2),
        (1, 2, 1),
        (4, 2, 3),
    ]
    assert lines[0][1].name == "Breakfast"
    assert lines[0][1].cost == Decimal("15.00")


@pytest.mark.integration
def test_fetch_room_occupancy_counts_occupied_rooms(seeded_engine) -> None:
    with seeded_engine.connect() as conn:
        occupancy = fetch_room_occupancy(conn)

    assert occupancy.occupied_rooms == 2
    assert occupancy.total_rooms == 4


@pytest.mark.integration
def test_fetch_room_occupancy_empty_database(engine) -> None:
    with engine.connect() as conn:
        occupancy = fetch_room_occupancy(conn)

    assert occupancy.occupied_rooms == 0
    assert occupancy.total_rooms == 0


@pytest.mark.integration
def test_readers_accept_room_types_outside_the_well_known_set(seeded_engine) -> None:
    with seeded_engine.begin() as conn:
        conn.execute(
            insert(Room).values(room_id=5, room_number="105", room_type="DELUXE", status="AVAILABLE")
        )
        conn.execute(
            insert(Rate).values(
                room_type="DELUXE", effective_date=date(2025, 1, 1), price=Decimal("90")
            )
        )
        conn.execute(
            insert(Reservation).values(
                reservation_id=5,
                guest_id=1,
                room_id=5,
                checkin_date=date(2025, 7, 1),
                checkout_date=date(2025, 7, 3),
                status="PENDING",
            )
        )

    with seeded_engine.connect() as conn:
        entries = fetch_rates_as_of(conn, date(2025, 7, 1))
        records = fetch_reservations(conn)

    assert {e.room_type: e.price for e in entries}["DELUXE"] == Decimal("90")
    assert records[-1].reservation_id == 5
    assert records[-1].room_type == "DELUXE"
