from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_pricing.models.services import ReservationService, Service
from hotel_pricing.schemas.services import ServiceItem


def fetch_service_lines(conn: Connection) -> list[tuple[int, ServiceItem]]:
    """
    Fetch every billed service line with its catalogue unit price.

    Args:
        conn (Connection): An active SQLAlchemy database connection.

    Returns:
        list[tuple[int, ServiceItem]]: (reservation_id, item) pairs in the
        order the lines were recorded
    """
    stmt = (
        select(
            ReservationService.reservation_id,
            ReservationService.service_id,
            ReservationService.quantity,
            Service.name,
            Service.unit_price,
        )
        .join(Service, Service.service_id == ReservationService.service_id)
        .order_by(ReservationService.reservation_id, ReservationService.id)
    )

    lines = []
    for row in conn.execute(stmt).mappings():
        item = ServiceItem(
            service_id=row["service_id"],
            unit_price=row["unit_price"],
            quantity=row["quantity"],
            name=row["name"],
        )
        lines.append((row["reservation_id"], item))
    return lines
