"""UTC date and time utilities."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    This function should be used instead of datetime.now() or datetime.utcnow()
    to ensure all timestamps are timezone-aware and stored in UTC.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """
    Return the current calendar date in UTC.

    Used as the default "as of" date for rate lookups when none is configured,
    so that a run's pricing date does not depend on the host's local timezone.

    Returns:
        Today's date in UTC
    """
    return utc_now().date()


def nights_between(checkin: date, checkout: date) -> int:
    """
    Number of nights between two dates (checkout day not counted).

    Example:
        >>> nights_between(date(2025, 7, 1), date(2025, 7, 3))
        2
    """
    return (checkout - checkin).days
