from sqlalchemy import case, func, select
from sqlalchemy.engine import Connection

from hotel_pricing.models.rooms import Room
from hotel_pricing.schemas.reports import RoomOccupancy

OCCUPIED_STATUS = "OCCUPIED"


def fetch_room_occupancy(conn: Connection) -> RoomOccupancy:
    """
    Count occupied and total rooms from the current room statuses.

    Args:
        conn (Connection): An active SQLAlchemy database connection.

    Returns:
        RoomOccupancy: occupied_rooms and total_rooms
    """
    stmt = select(
        func.count(Room.room_id).label("total_rooms"),
        func.coalesce(
            func.sum(case((Room.status == OCCUPIED_STATUS, 1), else_=0)), 0
        ).label("occupied_rooms"),
    )
    row = conn.execute(stmt).mappings().one()
    return RoomOccupancy(
        occupied_rooms=int(row["occupied_rooms"]), total_rooms=int(row["total_rooms"])
    )
