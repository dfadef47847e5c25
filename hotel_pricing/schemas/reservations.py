from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hotel_pricing.schemas.rates import RoomTypeCode
from hotel_pricing.utils.datetime import nights_between


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class ReservationRecord(BaseModel):
    """
    In-memory reservation owned by the ReservationRegistry.

    Guest and room foreign keys arrive resolved from the data source so that
    reports can be rendered without another round trip. Only the pricing
    engine (total_amount, status) and cancellation (status) mutate a record.
    Date ranges are not validated here: the registry rejects bad ranges on
    insert and the pricing engine re-checks before computing.
    """

    model_config = ConfigDict(from_attributes=True)

    reservation_id: int = Field(..., description="Unique reservation ID")
    guest_id: int = Field(..., description="Guest ID")
    room_id: int = Field(..., description="Room ID")
    room_type: RoomTypeCode = Field(..., description="Type of the booked room")
    checkin_date: date
    checkout_date: date
    total_amount: Optional[Decimal] = Field(None, description="Computed stay total")
    status: ReservationStatus = ReservationStatus.PENDING
    guest_name: Optional[str] = None
    room_number: Optional[str] = None

    @property
    def nights(self) -> int:
        return nights_between(self.checkin_date, self.checkout_date)
