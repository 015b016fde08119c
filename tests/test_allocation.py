from decimal import Decimal

import pytest

from bajeti.db.core import AllocationType
from bajeti.errors import ValidationError
from bajeti.models.budget import AllocationSplit
from bajeti.services.allocation import allocate, derive_percentages, rebalance_split
from bajeti.services.money import quantize


def split(needs, wants, savings):
    return AllocationSplit(needs=Decimal(str(needs)), wants=Decimal(str(wants)), savings=Decimal(str(savings)))


def test_allocate_default_split():
    amounts = allocate(Decimal("1000"), split(50, 30, 20), "TZS")

    assert amounts.needs_amount == Decimal("500.00")
    assert amounts.wants_amount == Decimal("300.00")
    assert amounts.savings_amount == Decimal("200.00")
    assert amounts.currency == "TZS"


@pytest.mark.parametrize("income", ["100.01", "999.99", "1234567.89", "0.05", "7"])
@pytest.mark.parametrize("needs,wants,savings", [
    (50, 30, 20),
    ("33.33", "33.33", "33.34"),
    (100, 0, 0),
    ("12.5", "62.5", 25),
    ("33.333", "33.333", "33.334"),
])
def test_allocated_amounts_add_up_to_income(income, needs, wants, savings):
    amounts = allocate(Decimal(income), split(needs, wants, savings), "TZS")

    assert amounts.total == quantize(Decimal(income), "TZS")


def test_leftover_minor_unit_goes_to_largest_remainder():
    amounts = allocate(Decimal("1001"), split(50, 30, 20), "JPY")

    assert (amounts.needs_amount, amounts.wants_amount, amounts.savings_amount) == (
        Decimal("501"), Decimal("300"), Decimal("200"))


@pytest.mark.parametrize("needs,wants,savings", [(50, 30, 19), (50, 30, 21)])
def test_split_not_summing_to_100_is_rejected(needs, wants, savings):
    with pytest.raises(ValidationError) as exc:
        allocate(Decimal("1000"), split(needs, wants, savings), "TZS")
    assert exc.value.constraint == "sum"


@pytest.mark.parametrize("needs,wants,savings,field", [
    (101, -1, 0, "needs"),
    (110, 0, -10, "needs"),
    (60, -10, 50, "wants"),
])
def test_percentage_outside_range_is_rejected(needs, wants, savings, field):
    with pytest.raises(ValidationError) as exc:
        allocate(Decimal("1000"), split(needs, wants, savings), "TZS")
    assert exc.value.constraint == "range"
    assert exc.value.field == field


@pytest.mark.parametrize("income", [0, -5])
def test_income_must_be_positive(income):
    with pytest.raises(ValidationError) as exc:
        allocate(income, split(50, 30, 20), "TZS")
    assert exc.value.field == "income_amount"


def test_rebalance_splits_remainder_equally():
    result = rebalance_split(split(50, 30, 20), AllocationType.NEEDS, 70)

    assert (result.needs, result.wants, result.savings) == (Decimal("70"), Decimal("15"), Decimal("15"))


def test_rebalance_accepts_bucket_name():
    result = rebalance_split(split(50, 30, 20), "savings", 40)

    assert (result.needs, result.wants, result.savings) == (Decimal("30"), Decimal("30"), Decimal("40"))


def test_rebalance_rejects_bad_input():
    with pytest.raises(ValidationError):
        rebalance_split(split(50, 30, 20), "needs", 120)
    with pytest.raises(ValidationError):
        rebalance_split(split(50, 30, 20), "luxuries", 10)


@pytest.mark.parametrize("needs,wants,savings", [(50, 30, 20), ("45.5", "34.5", 20), ("33.33", "33.33", "33.34")])
def test_percentages_survive_round_trip(needs, wants, savings):
    original = split(needs, wants, savings)
    income = Decimal("1234.56")

    derived = derive_percentages(income, allocate(income, original, "TZS"))

    for bucket in ("needs", "wants", "savings"):
        assert abs(getattr(derived, bucket) - getattr(original, bucket)) <= Decimal("0.01")
