from typing import Iterable

import structlog
from sqlalchemy import bindparam, update
from sqlalchemy.engine import Connection, Engine

from hotel_pricing.models.reservations import Reservation
from hotel_pricing.schemas.reservations import ReservationStatus
from hotel_pricing.services.pricing import PricingOutcome
from hotel_pricing.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def update_reservation_totals(
    engine: Engine, outcomes: Iterable[PricingOutcome], dry_run: bool = False
) -> int:
    """
    Persist computed totals and statuses for priced reservations.

    Unpriced outcomes are skipped: their stored total is left untouched.
    All rows are written in a single transaction.

    Args:
        engine: SQLAlchemy Engine
        outcomes: Batch pricing outcomes
        dry_run: If True, skip DB writes and log only

    Returns:
        int: Number of reservations written (or that would be written on dry run)
    """
    rows = [
        {
            "b_reservation_id": o.reservation_id,
            "b_total_amount": o.total,
            "b_status": o.status.value if o.status else ReservationStatus.PENDING.value,
        }
        for o in outcomes
        if o.priced
    ]

    if dry_run:
        logger.info("[DRY RUN] Would update %d reservation totals", len(rows))
        return len(rows)

    if not rows:
        logger.info("No reservation totals to update")
        return 0

    stmt = (
        update(Reservation)
        .where(Reservation.reservation_id == bindparam("b_reservation_id"))
        .values(total_amount=bindparam("b_total_amount"), status=bindparam("b_status"))
    )

    with engine.begin() as conn:
        conn.execute(stmt, rows)

    logger.info("Updated %d reservation totals in DB", len(rows))
    return len(rows)


def persist_cancellation(conn: Connection, reservation_id: int) -> None:
    """
    Record a cancellation tombstone for a reservation.

    The row is kept; only status and cancelled_at change.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        reservation_id (int): Reservation ID.
    """
    stmt = (
        update(Reservation)
        .where(Reservation.reservation_id == reservation_id)
        .values(status=ReservationStatus.CANCELLED.value, cancelled_at=utc_now())
    )

    conn.execute(stmt)

    logger.info("Persisted cancellation for reservation_id=%s", reservation_id)
