from sqlalchemy import Column, Integer, String

from hotel_pricing.models.base import Base


class Room(Base):
    """
    ORM model for physical rooms.

    status is the live housekeeping state ("OCCUPIED", "AVAILABLE",
    "MAINTENANCE", ...); occupancy counts rooms whose status is OCCUPIED.
    """

    __tablename__ = "rooms"

    room_id = Column(Integer, primary_key=True)
    room_number = Column(String, nullable=False, unique=True)
    room_type = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, server_default="AVAILABLE")
