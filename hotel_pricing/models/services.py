from sqlalchemy import Column, ForeignKey, Integer, Numeric, String

from hotel_pricing.models.base import Base


class Service(Base):
    """ORM model for the billable service catalogue (spa, breakfast, parking...)."""

    __tablename__ = "services"

    service_id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)


class ReservationService(Base):
    """ORM model for a service line billed to a reservation."""

    __tablename__ = "reservation_services"

    id = Column(Integer, primary_key=True)
    reservation_id = Column(
        Integer,
        ForeignKey("reservations.reservation_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_id = Column(Integer, ForeignKey("services.service_id"), nullable=False)
    quantity = Column(Integer, nullable=False, server_default="1")
