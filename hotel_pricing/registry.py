"""
Index-stable reservation store with tombstone deletion.

Entries are kept in a dict keyed by reservation_id, which gives O(1)
existence checks and preserves insertion order for iteration. Deleting an
entry only flips its live marker; nothing is physically removed during a
processing run, so aggregation over the registry can be repeated and yields
the same result. A tombstoned id stays reserved and cannot be inserted again.
"""

from __future__ import annotations

from typing import Iterable, Iterator

import structlog

from hotel_pricing.errors import (
    BatchRejected,
    DuplicateKey,
    HotelPricingError,
    InvalidDateRange,
    NotFound,
)
from hotel_pricing.metrics import registry_operations
from hotel_pricing.schemas.reservations import ReservationRecord, ReservationStatus

logger = structlog.get_logger(__name__)


class RegistryEntry:
    """A reservation record plus its live/deleted marker."""

    __slots__ = ("record", "live")

    def __init__(self, record: ReservationRecord, live: bool = True):
        self.record = record
        self.live = live

    def __repr__(self) -> str:
        state = "live" if self.live else "deleted"
        return f"RegistryEntry({self.record.reservation_id}, {state})"


def _validate_date_range(record: ReservationRecord) -> None:
    if record.checkout_date <= record.checkin_date:
        raise InvalidDateRange(record.reservation_id, record.checkin_date, record.checkout_date)


class ReservationRegistry:
    """
    Unbounded collection of reservations supporting tombstone deletion.

    Example:
        >>> registry = ReservationRegistry()
        >>> registry.insert(record)
        >>> registry.exists(record.reservation_id)
        True
        >>> registry.delete(record.reservation_id)
        >>> registry.exists(record.reservation_id)
        False
    """

    def __init__(self) -> None:
        self._entries: dict[int, RegistryEntry] = {}

    def _check_insertable(self, record: ReservationRecord) -> None:
        entry = self._entries.get(record.reservation_id)
        if entry is not None:
            raise DuplicateKey(record.reservation_id, tombstoned=not entry.live)
        _validate_date_range(record)

    def _commit(self, record: ReservationRecord) -> None:
        self._entries[record.reservation_id] = RegistryEntry(record)

    def insert(self, record: ReservationRecord) -> None:
        """
        Insert a single reservation.

        Raises:
            DuplicateKey: If the id is live or was tombstoned in this registry
            InvalidDateRange: If checkout is not after check-in
        """
        try:
            self._check_insertable(record)
        except HotelPricingError:
            registry_operations.labels(operation="insert", status="failure").inc()
            raise

        self._commit(record)
        registry_operations.labels(operation="insert", status="success").inc()

    def bulk_insert(self, records: Iterable[ReservationRecord]) -> int:
        """
        Insert a batch of reservations as a single all-or-nothing unit.

        Every record is validated before any is committed: ids must be unique
        within the batch and against every held entry (tombstones included),
        and date ranges must be sane. A single bad record leaves the registry
        exactly as it was.

        Args:
            records: Reservations to insert

        Returns:
            int: Number of records inserted

        Raises:
            BatchRejected: If any record is invalid; `.problems` lists all of them
        """
        batch = list(records)
        problems: list[HotelPricingError] = []
        seen: set[int] = set()

        for record in batch:
            if record.reservation_id in seen:
                problems.append(DuplicateKey(record.reservation_id))
                continue
            seen.add(record.reservation_id)
            try:
                self._check_insertable(record)
            except HotelPricingError as e:
                problems.append(e)

        if problems:
            registry_operations.labels(operation="bulk_insert", status="failure").inc()
            logger.error(
                "bulk_insert_rejected",
                batch_size=len(batch),
                problem_count=len(problems),
            )
            raise BatchRejected(problems)

        for record in batch:
            self._commit(record)

        registry_operations.labels(operation="bulk_insert", status="success").inc()
        logger.info("bulk_insert_committed", batch_size=len(batch))
        return len(batch)

    def exists(self, reservation_id: int) -> bool:
        entry = self._entries.get(reservation_id)
        return entry is not None and entry.live

    def get(self, reservation_id: int) -> ReservationRecord:
        """
        Return the live record for an id.

        Raises:
            NotFound: If the id is absent or tombstoned
        """
        entry = self._entries.get(reservation_id)
        if entry is None or not entry.live:
            raise NotFound(reservation_id)
        return entry.record

    def delete(self, reservation_id: int) -> None:
        """
        Tombstone a reservation. The entry stays in place but is no longer live.

        Raises:
            NotFound: If the id is absent or already tombstoned
        """
        entry = self._entries.get(reservation_id)
        if entry is None or not entry.live:
            registry_operations.labels(operation="delete", status="failure").inc()
            raise NotFound(reservation_id)

        entry.live = False
        registry_operations.labels(operation="delete", status="success").inc()

    def cancel(self, reservation_id: int) -> ReservationRecord:
        """
        Mark a reservation CANCELLED and tombstone it.

        Returns:
            ReservationRecord: The cancelled record

        Raises:
            NotFound: If the id is absent or already tombstoned
        """
        try:
            record = self.get(reservation_id)
        except NotFound:
            registry_operations.labels(operation="cancel", status="failure").inc()
            raise

        record.status = ReservationStatus.CANCELLED
        self._entries[reservation_id].live = False
        registry_operations.labels(operation="cancel", status="success").inc()
        logger.info("reservation_cancelled", reservation_id=reservation_id)
        return record

    def iter_live(self) -> Iterator[ReservationRecord]:
        """Iterate live records in insertion order. Each call starts a fresh pass."""
        return (entry.record for entry in list(self._entries.values()) if entry.live)

    def tombstones(self) -> int:
        """Number of tombstoned entries still held in place."""
        return sum(1 for entry in self._entries.values() if not entry.live)

    def __len__(self) -> int:
        return sum(1 for entry in self._entries.values() if entry.live)
