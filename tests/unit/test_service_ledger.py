from decimal import Decimal

import pytest

from hotel_pricing.errors import CapacityExceeded
from hotel_pricing.ledger import ServiceLedger
from hotel_pricing.schemas.services import ServiceItem


def _item(service_id: int, unit_price: str = "5", quantity: int = 1) -> ServiceItem:
    return ServiceItem(service_id=service_id, unit_price=Decimal(unit_price), quantity=quantity)


@pytest.mark.unit
def test_empty_ledger_costs_zero() -> None:
    ledger = ServiceLedger(capacity=3)

    assert ledger.total_cost() == Decimal("0")
    assert len(ledger) == 0


@pytest.mark.unit
def test_total_cost_sums_unit_price_times_quantity() -> None:
    ledger = ServiceLedger(capacity=5)
    ledger.append(_item(1, "5", 1))
    ledger.append(_item(2, "2.50", 4))

    assert ledger.total_cost() == Decimal("15.00")


@pytest.mark.unit
def test_accepts_exactly_capacity_items_and_rejects_the_next() -> None:
    ledger = ServiceLedger(capacity=10, reservation_id=42)
    for i in range(10):
        ledger.append(_item(i))

    assert len(ledger) == 10
    assert ledger.is_full

    with pytest.raises(CapacityExceeded) as exc_info:
        ledger.append(_item(99))

    assert exc_info.value.capacity == 10
    assert exc_info.value.reservation_id == 42
    assert len(ledger) == 10  # rejected item was not added


@pytest.mark.unit
def test_iteration_preserves_insertion_order() -> None:
    ledger = ServiceLedger(capacity=4)
    for service_id in (7, 3, 9):
        ledger.append(_item(service_id))

    assert [item.service_id for item in ledger] == [7, 3, 9]


@pytest.mark.unit
def test_default_capacity_comes_from_config() -> None:
    from hotel_pricing.config import SERVICE_LEDGER_CAPACITY

    assert ServiceLedger().capacity == SERVICE_LEDGER_CAPACITY


@pytest.mark.unit
def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ServiceLedger(capacity=0)
