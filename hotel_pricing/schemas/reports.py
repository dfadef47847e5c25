from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from hotel_pricing.schemas.rates import RoomTypeCode


class RoomOccupancy(BaseModel):
    """Room status counts read from the room inventory at summary time."""

    occupied_rooms: int = Field(0, ge=0)
    total_rooms: int = Field(0, ge=0)


class SummaryStats(BaseModel):
    """Aggregate block of the pricing report."""

    total_reservations: int = 0
    total_revenue: Decimal = Decimal("0")
    occupancy_rate: int = Field(0, description="Occupied rooms as a whole percentage")


class ReservationLine(BaseModel):
    """One row of the per-reservation section of the pricing report."""

    reservation_id: int
    guest_name: Optional[str] = None
    room_number: Optional[str] = None
    room_type: RoomTypeCode
    nights: int
    total: Optional[Decimal] = None
    priced: bool = True
    reason: Optional[str] = Field(None, description="Why the reservation is unpriced")


class PricingReport(BaseModel):
    """Structured values needed to render the pricing report."""

    lines: list[ReservationLine] = Field(default_factory=list)
    summary: SummaryStats = Field(default_factory=SummaryStats)

    @property
    def unpriced(self) -> list[ReservationLine]:
        return [line for line in self.lines if not line.priced]
