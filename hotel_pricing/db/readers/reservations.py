from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_pricing.models.guests import Guest
from hotel_pricing.models.reservations import Reservation
from hotel_pricing.models.rooms import Room
from hotel_pricing.schemas.reservations import ReservationRecord


def fetch_reservations(conn: Connection) -> list[ReservationRecord]:
    """
    Fetch all reservations with guest name and room number/type resolved.

    total_amount is deliberately not read: every run prices from scratch, so a
    stale total from an earlier run can never leak into this run's revenue.

    Args:
        conn (Connection): An active SQLAlchemy database connection.

    Returns:
        list[ReservationRecord]: Reservations ordered by reservation_id
    """
    stmt = (
        select(
            Reservation.reservation_id,
            Reservation.guest_id,
            Reservation.room_id,
            Reservation.checkin_date,
            Reservation.checkout_date,
            Reservation.status,
            Guest.name.label("guest_name"),
            Room.room_number,
            Room.room_type,
        )
        .join(Guest, Guest.guest_id == Reservation.guest_id)
        .join(Room, Room.room_id == Reservation.room_id)
        .order_by(Reservation.reservation_id)
    )

    rows = conn.execute(stmt).mappings().all()
    return [ReservationRecord.model_validate(dict(row)) for row in rows]
