from sqlalchemy import Column, Date, Numeric, String

from hotel_pricing.models.base import Base


class Rate(Base):
    """
    ORM model for nightly room-type rates.

    A row applies from effective_date until the next row for the same room type.
    """

    __tablename__ = "rates"

    room_type = Column(String, primary_key=True)
    effective_date = Column(Date, primary_key=True)
    price = Column(Numeric(10, 2), nullable=False)
