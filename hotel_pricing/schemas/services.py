from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceItem(BaseModel):
    """A billable service line attached to one reservation."""

    model_config = ConfigDict(frozen=True)

    service_id: int = Field(..., description="Service catalogue ID")
    unit_price: Decimal = Field(..., ge=0, description="Price per unit")
    quantity: int = Field(1, ge=1, description="Units consumed")
    name: Optional[str] = Field(None, description="Service name for reporting")

    @property
    def cost(self) -> Decimal:
        return self.unit_price * self.quantity
