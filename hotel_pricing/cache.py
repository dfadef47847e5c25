"""
In-memory nightly rate cache keyed by room type and date.

The cache is a sparse mapping: keys are never pre-declared and it grows with
every distinct (room_type, date) pair that is put. A lookup never raises and
never falls back to a default price. It returns either Found(price) or the
Miss singleton, so every caller has to branch on the outcome explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Union

import structlog

from hotel_pricing.metrics import rate_cache_lookups
from hotel_pricing.schemas.rates import RateEntry, RoomType, room_type_code

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Found:
    """Successful rate lookup."""

    price: Decimal


class _Miss:
    """Lookup outcome for a key with no cached rate. Falsy, unlike Found."""

    _instance: "_Miss | None" = None

    def __new__(cls) -> "_Miss":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Miss"


Miss = _Miss()

RateLookup = Union[Found, _Miss]


class RateCache:
    """
    Sparse rate lookup by (room_type, date).

    Room types are stored as their plain string code, so RoomType members and
    codes outside the well-known set (e.g. "DELUXE") address the same keys.

    Example:
        >>> cache = RateCache()
        >>> cache.put(RoomType.SINGLE, date(2025, 7, 1), Decimal("30"))
        >>> cache.get(RoomType.SINGLE, date(2025, 7, 1))
        Found(price=Decimal('30'))
        >>> cache.get(RoomType.SUITE, date(2025, 7, 1))
        Miss
    """

    def __init__(self) -> None:
        self._rates: dict[tuple[str, date], Decimal] = {}

    def put(self, room_type: RoomType | str, on: date, price: Decimal) -> None:
        """
        Insert or overwrite the rate for a room type on a date.

        Args:
            room_type: Room category
            on: Date the rate is keyed on
            price: Nightly price
        """
        self._rates[(room_type_code(room_type), on)] = Decimal(price)

    def put_entry(self, entry: RateEntry) -> None:
        self.put(entry.room_type, entry.effective_date, entry.price)

    def get(self, room_type: RoomType | str, on: date) -> RateLookup:
        """
        Look up the rate for a room type on a date.

        Args:
            room_type: Room category
            on: Lookup date

        Returns:
            Found(price) if a rate is cached for the key, Miss otherwise
        """
        code = room_type_code(room_type)
        price = self._rates.get((code, on))
        if price is None:
            rate_cache_lookups.labels(result="miss").inc()
            logger.debug("rate_cache_miss", room_type=code, on=on.isoformat())
            return Miss

        rate_cache_lookups.labels(result="hit").inc()
        return Found(price)

    def __len__(self) -> int:
        return len(self._rates)

