"""Reservation pricing: nights x nightly rate + billed services."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

import structlog
from pydantic import BaseModel

from hotel_pricing.cache import Found, RateCache
from hotel_pricing.config import (
    CONFIRM_ON_PRICING,
    RATE_AS_OF,
    RATE_POLICY,
    SERVICE_LEDGER_CAPACITY,
)
from hotel_pricing.errors import (
    CapacityExceeded,
    HotelPricingError,
    InvalidDateRange,
    RateUnavailable,
)
from hotel_pricing.ledger import ServiceLedger
from hotel_pricing.metrics import pricing_outcomes
from hotel_pricing.registry import ReservationRegistry
from hotel_pricing.schemas.reservations import ReservationRecord, ReservationStatus
from hotel_pricing.schemas.services import ServiceItem
from hotel_pricing.utils.datetime import utc_today

logger = structlog.get_logger(__name__)


class RatePolicy(str, Enum):
    """Which date a reservation's nightly rate is looked up on."""

    RUN_DATE = "run_date"
    CHECKIN_DATE = "checkin_date"


class PricingOutcome(BaseModel):
    """Result of pricing one reservation within a batch."""

    reservation_id: int
    total: Optional[Decimal] = None
    status: Optional[ReservationStatus] = None
    error: Optional[str] = None
    message: Optional[str] = None

    @property
    def priced(self) -> bool:
        return self.error is None


class PricingEngine:
    """
    Computes reservation totals from the registry, rate cache and service ledgers.

    Attributes:
        registry: Reservation store; priced records are updated in place
        rates: Rate cache consulted for nightly prices
        as_of: Lookup date used under RatePolicy.RUN_DATE
        policy: Rate lookup date policy
        confirm_on_success: Promote PENDING reservations to CONFIRMED once priced
    """

    def __init__(
        self,
        registry: ReservationRegistry,
        rates: RateCache,
        as_of: Optional[date] = None,
        policy: RatePolicy | str = RATE_POLICY,
        ledger_capacity: int = SERVICE_LEDGER_CAPACITY,
        confirm_on_success: bool = CONFIRM_ON_PRICING,
    ):
        self.registry = registry
        self.rates = rates
        self.as_of = as_of or RATE_AS_OF or utc_today()
        self.policy = RatePolicy(policy)
        self.ledger_capacity = ledger_capacity
        self.confirm_on_success = confirm_on_success
        self._ledgers: dict[int, ServiceLedger] = {}
        self._ledger_faults: dict[int, CapacityExceeded] = {}

    # ==================== SERVICE LEDGERS ====================

    def ledger_for(self, reservation_id: int) -> ServiceLedger:
        """Return the reservation's ledger, creating an empty one on first use."""
        ledger = self._ledgers.get(reservation_id)
        if ledger is None:
            ledger = ServiceLedger(self.ledger_capacity, reservation_id=reservation_id)
            self._ledgers[reservation_id] = ledger
        return ledger

    def attach_service(self, reservation_id: int, item: ServiceItem) -> None:
        """
        Append a service item to a reservation's ledger.

        An overflow is remembered so that compute_total refuses to price the
        reservation from a ledger that is missing services.

        Raises:
            CapacityExceeded: If the ledger is full
        """
        try:
            self.ledger_for(reservation_id).append(item)
        except CapacityExceeded as e:
            self._ledger_faults.setdefault(reservation_id, e)
            raise

    # ==================== PRICING ====================

    def rate_date_for(self, record: ReservationRecord) -> date:
        if self.policy is RatePolicy.CHECKIN_DATE:
            return record.checkin_date
        return self.as_of

    def compute_total(self, reservation_id: int) -> Decimal:
        """
        Price one reservation and write the total back to its registry record.

        Recomputing with unchanged rates and services yields the same total.

        Args:
            reservation_id: Reservation to price

        Returns:
            Decimal: nights * nightly rate + service total

        Raises:
            NotFound: Reservation is absent or cancelled
            InvalidDateRange: Stay is shorter than one night
            RateUnavailable: No cached rate for the room type on the lookup date
            CapacityExceeded: The reservation's services overflowed its ledger
        """
        record = self.registry.get(reservation_id)

        nights = record.nights
        if nights < 1:
            raise InvalidDateRange(reservation_id, record.checkin_date, record.checkout_date)

        rate_date = self.rate_date_for(record)
        lookup = self.rates.get(record.room_type, rate_date)
        if not isinstance(lookup, Found):
            raise RateUnavailable(reservation_id, record.room_type, rate_date)

        fault = self._ledger_faults.get(reservation_id)
        if fault is not None:
            raise fault

        ledger = self._ledgers.get(reservation_id)
        service_total = ledger.total_cost() if ledger is not None else Decimal("0")

        total = nights * lookup.price + service_total

        record.total_amount = total
        if self.confirm_on_success and record.status is ReservationStatus.PENDING:
            record.status = ReservationStatus.CONFIRMED

        logger.debug(
            "reservation_priced",
            reservation_id=reservation_id,
            nights=nights,
            rate=str(lookup.price),
            service_total=str(service_total),
            total=str(total),
        )
        return total

    def price_all(self, reservation_ids: Optional[Iterable[int]] = None) -> list[PricingOutcome]:
        """
        Price a batch of reservations, one at a time, without aborting on failures.

        Each reservation is fully priced (or fully fails) before the next one
        starts. Pricing errors become unpriced outcomes carrying the error name.

        Args:
            reservation_ids: Reservations to price (default: all live, in insertion order)

        Returns:
            list[PricingOutcome]: One outcome per reservation, in processing order
        """
        if reservation_ids is None:
            reservation_ids = [r.reservation_id for r in self.registry.iter_live()]

        outcomes: list[PricingOutcome] = []
        for reservation_id in reservation_ids:
            try:
                total = self.compute_total(reservation_id)
            except HotelPricingError as e:
                reason = type(e).__name__
                logger.warning(
                    "reservation_unpriced",
                    reservation_id=reservation_id,
                    reason=reason,
                    error=str(e),
                )
                pricing_outcomes.labels(status="unpriced", reason=reason).inc()
                outcomes.append(
                    PricingOutcome(reservation_id=reservation_id, error=reason, message=str(e))
                )
                continue

            pricing_outcomes.labels(status="priced", reason="").inc()
            outcomes.append(
                PricingOutcome(
                    reservation_id=reservation_id,
                    total=total,
                    status=self.registry.get(reservation_id).status,
                )
            )

        priced = sum(1 for o in outcomes if o.priced)
        logger.info(
            "batch_pricing_completed",
            priced=priced,
            unpriced=len(outcomes) - priced,
        )
        return outcomes
