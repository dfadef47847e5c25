from sqlalchemy import Column, Integer, String

from hotel_pricing.models.base import Base


class Guest(Base):
    """ORM model for hotel guests. Only the display name is used by reports."""

    __tablename__ = "guests"

    guest_id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
