# models/reservations.py

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String

from hotel_pricing.models.base import Base


class Reservation(Base):
    """
    ORM model for room reservations.

    total_amount stays NULL until a pricing run writes it. Cancelled
    reservations keep their row; status becomes CANCELLED and cancelled_at
    records when.
    """

    __tablename__ = "reservations"

    reservation_id = Column(Integer, primary_key=True, autoincrement=False)
    guest_id = Column(Integer, ForeignKey("guests.guest_id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.room_id"), nullable=False, index=True)
    checkin_date = Column(Date, nullable=False)
    checkout_date = Column(Date, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=True)
    status = Column(String, nullable=False, server_default="PENDING")
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
