import logging
import sys

from hotel_pricing.config import DRY_RUN
from hotel_pricing.db.engine import check_engine_health, get_engine
from hotel_pricing.logging_config import setup_logging
from hotel_pricing.services.flow import FlowState
from hotel_pricing.services.run import run_pricing

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


def main() -> int:
    # Price every reservation and log the summary; non-zero exit if the run failed
    engine = get_engine()
    if not check_engine_health(engine):
        logger.error("Database is unreachable, pricing run not started")
        return 1

    run = run_pricing(engine, dry_run=DRY_RUN)

    if run.state is not FlowState.DONE:
        failure = run.failure
        logger.error(
            "Pricing run ended in %s at step %s: %s",
            run.state.value,
            failure.step if failure else "?",
            failure.detail if failure else "",
        )
        return 1

    report = run.report
    if report is None:
        return 1

    summary = report.summary
    logger.info(
        "Pricing run done: reservations=%d unpriced=%d revenue=%s occupancy=%d%%",
        summary.total_reservations,
        len(report.unpriced),
        summary.total_revenue,
        summary.occupancy_rate,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
