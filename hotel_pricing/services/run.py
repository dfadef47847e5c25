"""Pricing run orchestrator: load, price, persist and summarize in one flow."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

import structlog
from sqlalchemy.engine import Engine

from hotel_pricing.cache import RateCache
from hotel_pricing.config import RATE_POLICY
from hotel_pricing.db.readers.rates import fetch_rates_as_of
from hotel_pricing.db.readers.reservations import fetch_reservations
from hotel_pricing.db.readers.rooms import fetch_room_occupancy
from hotel_pricing.db.readers.services import fetch_service_lines
from hotel_pricing.db.writers.reservations import persist_cancellation, update_reservation_totals
from hotel_pricing.errors import CapacityExceeded
from hotel_pricing.metrics import last_run_revenue, run_duration
from hotel_pricing.registry import ReservationRegistry
from hotel_pricing.schemas.reports import PricingReport
from hotel_pricing.schemas.reservations import ReservationRecord, ReservationStatus
from hotel_pricing.services.analytics import build_report
from hotel_pricing.services.flow import (
    Context,
    ErrorHandler,
    FlowController,
    FlowState,
    StepFailure,
    StepResult,
)
from hotel_pricing.services.pricing import PricingEngine, PricingOutcome, RatePolicy

logger = structlog.get_logger(__name__)


@dataclass
class PricingRun:
    """Everything a pricing run produced, including partial state after a failure."""

    run_id: str
    flow: FlowController
    registry: ReservationRegistry
    rates: RateCache
    pricing: PricingEngine
    outcomes: list[PricingOutcome] = field(default_factory=list)
    report: Optional[PricingReport] = None

    @property
    def state(self) -> FlowState:
        return self.flow.state

    @property
    def failure(self) -> Optional[StepFailure]:
        return self.flow.failure


def run_pricing(
    engine: Engine,
    as_of: Optional[date] = None,
    policy: Optional[RatePolicy | str] = None,
    dry_run: bool = False,
    on_error: Optional[ErrorHandler] = None,
) -> PricingRun:
    """
    Run a full pricing pass over every reservation in the database.

    Steps run in order and the first failure stops the run: a rejected
    reservation batch therefore ends in ERROR before any pricing happens.
    Individual reservations that cannot be priced do not fail the run; they
    show up as unpriced lines in the report.

    Args:
        engine (Engine): SQLAlchemy engine for the property database.
        as_of (date): Rate lookup date for the run_date policy (default: config/today).
        policy (RatePolicy): Rate date policy (default: RATE_POLICY config).
        dry_run (bool): If True, skip DB writes.
        on_error: Extra continuation invoked once if the run fails.

    Returns:
        PricingRun: Flow, registry, outcomes and (on success) the report
    """
    run_id = uuid.uuid4().hex[:12]
    registry = ReservationRegistry()
    rates = RateCache()
    pricing = PricingEngine(registry, rates, as_of=as_of, policy=policy or RATE_POLICY)

    def _on_error(failure: StepFailure) -> None:
        logger.error(
            "pricing_run_failed",
            step=failure.step,
            detail=failure.detail,
            dry_run=dry_run,
        )
        if on_error is not None:
            on_error(failure)

    flow = FlowController("pricing_run", on_error=_on_error)
    run = PricingRun(run_id=run_id, flow=flow, registry=registry, rates=rates, pricing=pricing)

    # ==================== STEPS ====================

    def load_reservations(ctx: Context) -> StepResult:
        with engine.connect() as conn:
            records = fetch_reservations(conn)

        registry.bulk_insert(records)

        # Cancelled rows stay in the registry as tombstones
        cancelled = [r.reservation_id for r in records if r.status is ReservationStatus.CANCELLED]
        for reservation_id in cancelled:
            registry.delete(reservation_id)

        return StepResult.success(
            value=len(records), detail=f"{len(records)} loaded, {len(cancelled)} cancelled"
        )

    def _load_rates_for(dates: set[date]) -> StepResult:
        with engine.connect() as conn:
            for on in sorted(dates):
                for entry in fetch_rates_as_of(conn, on):
                    rates.put_entry(entry)
        return StepResult.success(value=len(rates), detail=f"{len(dates)} rate date(s)")

    def load_run_date_rates(ctx: Context) -> StepResult:
        return _load_rates_for({pricing.as_of})

    def load_checkin_rates(ctx: Context) -> StepResult:
        return _load_rates_for({r.checkin_date for r in registry.iter_live()})

    def load_services(ctx: Context) -> StepResult:
        with engine.connect() as conn:
            lines = fetch_service_lines(conn)

        attached = 0
        overflowed: set[int] = set()
        for reservation_id, item in lines:
            if not registry.exists(reservation_id):
                continue
            try:
                pricing.attach_service(reservation_id, item)
            except CapacityExceeded:
                overflowed.add(reservation_id)
                continue
            attached += 1

        if overflowed:
            logger.warning(
                "service_ledger_overflow",
                reservation_ids=sorted(overflowed),
                capacity=pricing.ledger_capacity,
            )
        return StepResult.success(value=attached)

    def price_reservations(ctx: Context) -> StepResult:
        run.outcomes = pricing.price_all()
        return StepResult.success(value=len(run.outcomes))

    def persist_totals(ctx: Context) -> StepResult:
        written = update_reservation_totals(engine, run.outcomes, dry_run=dry_run)
        return StepResult.success(value=written)

    def summarize(ctx: Context) -> StepResult:
        with engine.connect() as conn:
            occupancy = fetch_room_occupancy(conn)
        run.report = build_report(registry, run.outcomes, occupancy)
        return StepResult.success(value=run.report.summary)

    flow.add_step("load_reservations", load_reservations)
    flow.add_step(
        "load_rates",
        flow.branch(
            "load_rates",
            selector=lambda ctx: pricing.policy,
            handlers={
                RatePolicy.RUN_DATE: load_run_date_rates,
                RatePolicy.CHECKIN_DATE: load_checkin_rates,
            },
        ),
    )
    flow.add_step("load_services", load_services)
    flow.add_step("price_reservations", price_reservations)
    flow.add_step("persist_totals", persist_totals)
    flow.add_step("summarize", summarize)

    # ==================== RUN ====================

    # Every log line emitted during the run carries run_id and flow
    with structlog.contextvars.bound_contextvars(run_id=run_id, flow=flow.name):
        logger.info(
            "pricing_run_started",
            as_of=pricing.as_of.isoformat(),
            policy=pricing.policy.value,
            dry_run=dry_run,
        )

        with run_duration.time():
            state = flow.run({"dry_run": dry_run})

        if state is FlowState.DONE and run.report is not None:
            last_run_revenue.set(float(run.report.summary.total_revenue))
            logger.info(
                "pricing_run_completed",
                reservations=run.report.summary.total_reservations,
                unpriced=len(run.report.unpriced),
                total_revenue=str(run.report.summary.total_revenue),
                occupancy_rate=run.report.summary.occupancy_rate,
            )

    return run


def cancel_reservation(
    engine: Engine,
    registry: ReservationRegistry,
    reservation_id: int,
    dry_run: bool = False,
) -> ReservationRecord:
    """
    Cancel a reservation in the database and tombstone it in the registry.

    The database write happens first so a failed write leaves the registry
    untouched.

    Args:
        engine (Engine): SQLAlchemy engine.
        registry (ReservationRegistry): Registry holding the reservation.
        reservation_id (int): Reservation to cancel.
        dry_run (bool): If True, skip the DB write.

    Returns:
        ReservationRecord: The cancelled record

    Raises:
        NotFound: If the reservation is absent or already cancelled
    """
    registry.get(reservation_id)

    if dry_run:
        logger.info("[DRY RUN] Would cancel reservation_id=%s", reservation_id)
    else:
        with engine.begin() as conn:
            persist_cancellation(conn, reservation_id)

    return registry.cancel(reservation_id)
