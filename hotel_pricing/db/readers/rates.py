from datetime import date

from sqlalchemy import and_, func, select
from sqlalchemy.engine import Connection

from hotel_pricing.models.rates import Rate
from hotel_pricing.schemas.rates import RateEntry


def fetch_rates_as_of(conn: Connection, as_of: date) -> list[RateEntry]:
    """
    Fetch the rate in effect on a date for every room type.

    For each room type the row with the latest effective_date on or before
    `as_of` wins. Room types with no such row are simply absent, which the
    rate cache later reports as a miss.

    The returned entries are keyed on `as_of` (not on the row's own
    effective_date) so they can be put straight into the rate cache under the
    date pricing will look them up with.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        as_of (date): Date the rates must be in effect on.

    Returns:
        list[RateEntry]: One entry per room type with a rate in effect
    """
    latest = (
        select(Rate.room_type, func.max(Rate.effective_date).label("effective_date"))
        .where(Rate.effective_date <= as_of)
        .group_by(Rate.room_type)
        .subquery()
    )
    stmt = (
        select(Rate.room_type, Rate.price)
        .join(
            latest,
            and_(
                Rate.room_type == latest.c.room_type,
                Rate.effective_date == latest.c.effective_date,
            ),
        )
        .order_by(Rate.room_type)
    )

    rows = conn.execute(stmt).mappings().all()
    return [
        RateEntry(room_type=row["room_type"], effective_date=as_of, price=row["price"])
        for row in rows
    ]
