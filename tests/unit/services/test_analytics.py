"""
Unit tests for summary statistics and report building.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from hotel_pricing.registry import ReservationRegistry
from hotel_pricing.schemas.reports import RoomOccupancy
from hotel_pricing.services.analytics import build_report, occupancy_percentage, summarize
from hotel_pricing.services.pricing import PricingOutcome


@pytest.mark.unit
def test_summarize_empty_registry_returns_zeroes() -> None:
    summary = summarize(ReservationRegistry())

    assert summary.total_reservations == 0
    assert summary.total_revenue == Decimal("0")
    assert summary.occupancy_rate == 0


@pytest.mark.unit
def test_summarize_counts_live_and_sums_computed_totals(make_record) -> None:
    registry = ReservationRegistry()
    registry.insert(make_record(1, total_amount=Decimal("75")))
    registry.insert(make_record(2, total_amount=Decimal("100.50")))
    registry.insert(make_record(3))  # unpriced
    registry.insert(make_record(4, total_amount=Decimal("999")))
    registry.delete(4)

    summary = summarize(registry, RoomOccupancy(occupied_rooms=3, total_rooms=8))

    assert summary.total_reservations == 3
    assert summary.total_revenue == Decimal("175.50")
    assert summary.occupancy_rate == 38  # 37.5% rounds half-up


@pytest.mark.unit
@pytest.mark.parametrize(
    ("occupied", "total", "expected"),
    [(0, 10, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (10, 10, 100), (0, 0, 0)],
)
def test_occupancy_percentage_rounding(occupied: int, total: int, expected: int) -> None:
    assert (
        occupancy_percentage(RoomOccupancy(occupied_rooms=occupied, total_rooms=total))
        == expected
    )


@pytest.mark.unit
def test_occupancy_unknown_is_zero() -> None:
    assert occupancy_percentage(None) == 0


@pytest.mark.unit
def test_summarize_is_repeatable(make_record) -> None:
    registry = ReservationRegistry()
    registry.insert(make_record(1, total_amount=Decimal("60")))

    assert summarize(registry) == summarize(registry)


@pytest.mark.unit
def test_build_report_marks_unpriced_reservations(make_record) -> None:
    registry = ReservationRegistry()
    registry.insert(make_record(1, total_amount=Decimal("75"), guest_name="Ada", room_number="101"))
    registry.insert(make_record(2, guest_name="Bob", room_number="301"))
    outcomes = [
        PricingOutcome(reservation_id=1, total=Decimal("75")),
        PricingOutcome(reservation_id=2, error="RateUnavailable", message="no rate"),
    ]

    report = build_report(registry, outcomes, RoomOccupancy(occupied_rooms=1, total_rooms=2))

    first, second = report.lines
    assert (first.reservation_id, first.guest_name, first.room_number) == (1, "Ada", "101")
    assert first.nights == 2
    assert first.total == Decimal("75")
    assert first.priced
    assert second.priced is False
    assert second.total is None
    assert second.reason == "RateUnavailable"
    assert report.unpriced == [second]
    assert report.summary.total_reservations == 2
    assert report.summary.total_revenue == Decimal("75")
    assert report.summary.occupancy_rate == 50
