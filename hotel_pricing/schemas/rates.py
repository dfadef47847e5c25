from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints


class RoomType(str, Enum):
    """Well-known room categories. The property database may define others."""

    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    SUITE = "SUITE"


def room_type_code(value: Any) -> Any:
    """Reduce a RoomType member to its plain string code; pass anything else through."""
    if isinstance(value, RoomType):
        return value.value
    return value


# Any non-empty room type code, so unknown categories (e.g. "DELUXE") load
# and simply miss in the rate cache instead of failing validation.
RoomTypeCode = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1),
    BeforeValidator(room_type_code),
]


class RateEntry(BaseModel):
    """
    Nightly price for a room type, keyed by the date it applies to.

    Entries are immutable once built; a newer price for the same key replaces
    the entry in the cache rather than mutating it.
    """

    model_config = ConfigDict(frozen=True)

    room_type: RoomTypeCode = Field(..., description="Room category the rate applies to")
    effective_date: date = Field(..., description="Date the rate is keyed on")
    price: Decimal = Field(..., ge=0, description="Nightly price")
