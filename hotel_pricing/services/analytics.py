"""Summary statistics and report rows folded from the reservation registry."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import structlog

from hotel_pricing.registry import ReservationRegistry
from hotel_pricing.schemas.reports import (
    PricingReport,
    ReservationLine,
    RoomOccupancy,
    SummaryStats,
)
from hotel_pricing.services.pricing import PricingOutcome

logger = structlog.get_logger(__name__)


def occupancy_percentage(occupancy: Optional[RoomOccupancy]) -> int:
    """
    Occupied rooms as a whole percentage of all rooms, rounded half-up.

    Returns 0 when the room inventory is unknown or empty.
    """
    if occupancy is None or occupancy.total_rooms == 0:
        return 0
    ratio = Decimal(occupancy.occupied_rooms) * 100 / Decimal(occupancy.total_rooms)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize(
    registry: ReservationRegistry, occupancy: Optional[RoomOccupancy] = None
) -> SummaryStats:
    """
    Fold live reservations into counts, revenue and occupancy.

    Unpriced reservations count toward total_reservations but add nothing to
    revenue. An empty registry yields zeroed statistics.

    Args:
        registry: Settled reservation registry
        occupancy: Room status counts from the room inventory

    Returns:
        SummaryStats: Aggregate block of the report
    """
    total_reservations = 0
    total_revenue = Decimal("0")

    for record in registry.iter_live():
        total_reservations += 1
        if record.total_amount is not None:
            total_revenue += record.total_amount

    return SummaryStats(
        total_reservations=total_reservations,
        total_revenue=total_revenue,
        occupancy_rate=occupancy_percentage(occupancy),
    )


def build_report(
    registry: ReservationRegistry,
    outcomes: Iterable[PricingOutcome] = (),
    occupancy: Optional[RoomOccupancy] = None,
) -> PricingReport:
    """
    Build the per-reservation lines and summary block for a pricing run.

    Reservations whose pricing failed appear with priced=False and the
    failure reason rather than being left out of the report.
    """
    failures = {o.reservation_id: o for o in outcomes if not o.priced}

    lines = []
    for record in registry.iter_live():
        failure = failures.get(record.reservation_id)
        lines.append(
            ReservationLine(
                reservation_id=record.reservation_id,
                guest_name=record.guest_name,
                room_number=record.room_number,
                room_type=record.room_type,
                nights=record.nights,
                total=None if failure else record.total_amount,
                priced=failure is None and record.total_amount is not None,
                reason=failure.error if failure else None,
            )
        )

    summary = summarize(registry, occupancy)
    logger.info(
        "report_built",
        lines=len(lines),
        unpriced=sum(1 for line in lines if not line.priced),
        total_revenue=str(summary.total_revenue),
        occupancy_rate=summary.occupancy_rate,
    )
    return PricingReport(lines=lines, summary=summary)
