"""
Needs/wants/savings allocation.

Splits an income amount by three percentages and keeps the UI sliders
consistent when one of them moves.
"""
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Dict, Union

from bajeti.db.core import AllocationType
from bajeti.errors import ValidationError
from bajeti.models.budget import AllocationSplit, AllocationAmounts
from bajeti.services.money import Number, normalize_currency, quantum, to_decimal


HUNDRED = Decimal("100")
SUM_TOLERANCE = Decimal("0.01")
PERCENT_PLACES = Decimal("0.01")

BUCKETS = ("needs", "wants", "savings")


def validate_split(split: AllocationSplit) -> Dict[str, Decimal]:
    """Check every percentage is within [0, 100] and that they add up to 100."""
    percentages = {}
    for bucket in BUCKETS:
        pct = to_decimal(getattr(split, bucket), field=bucket)
        if pct < 0 or pct > HUNDRED:
            raise ValidationError(f"{bucket} percentage must be between 0 and 100, got {pct}",
                                  field=bucket, constraint="range")
        percentages[bucket] = pct

    total = sum(percentages.values())
    if abs(total - HUNDRED) > SUM_TOLERANCE:
        raise ValidationError(f"needs, wants and savings must add up to 100, got {total}",
                              field="split", constraint="sum")
    return percentages


def _positive_income(income_amount: Number) -> Decimal:
    income = to_decimal(income_amount, field="income_amount")
    if income <= 0:
        raise ValidationError(f"income_amount must be positive, got {income}",
                              field="income_amount", constraint="positive")
    return income


def allocate(income_amount: Number, split: AllocationSplit, currency: str) -> AllocationAmounts:
    """
    Split ``income_amount`` into needs, wants and savings amounts.

    Each amount is ``income * pct / 100`` rounded to the currency's minor unit.
    Leftover minor units go to the buckets with the largest rounding remainder
    (needs first on ties), so the three amounts add up to the rounded total
    instead of drifting by a cent.

    Raises:
        ValidationError: non-positive income, a percentage outside [0, 100],
            or percentages not summing to 100 (within 0.01)
    """
    code = normalize_currency(currency)
    income = _positive_income(income_amount)
    percentages = validate_split(split)
    unit = quantum(code)

    raw = {bucket: income * pct / HUNDRED for bucket, pct in percentages.items()}
    amounts = {bucket: value.quantize(unit, rounding=ROUND_DOWN) for bucket, value in raw.items()}

    target = (income * sum(percentages.values()) / HUNDRED).quantize(unit, rounding=ROUND_HALF_UP)
    leftover_units = int((target - sum(amounts.values())) / unit)

    by_remainder = sorted(BUCKETS, key=lambda b: (-(raw[b] - amounts[b]), BUCKETS.index(b)))
    for i in range(leftover_units):
        amounts[by_remainder[i % len(by_remainder)]] += unit

    return AllocationAmounts(
        needs_amount=amounts["needs"],
        wants_amount=amounts["wants"],
        savings_amount=amounts["savings"],
        currency=code,
    )


def rebalance_split(split: AllocationSplit, changed: Union[AllocationType, str], value: Number) -> AllocationSplit:
    """
    Move one slider to ``value`` and share the rest equally between the other two.

    ``rebalance_split(50/30/20, "needs", 70)`` gives 70/15/15 whatever the
    previous wants/savings ratio was.
    """
    bucket = changed.value if isinstance(changed, AllocationType) else str(changed).strip().lower()
    if bucket not in BUCKETS:
        raise ValidationError(f"Unknown allocation bucket '{changed}'", field="changed", constraint="choice")

    new_value = to_decimal(value, field=bucket)
    if new_value < 0 or new_value > HUNDRED:
        raise ValidationError(f"{bucket} percentage must be between 0 and 100, got {new_value}",
                              field=bucket, constraint="range")

    share = (HUNDRED - new_value) / 2
    values = {b: share for b in BUCKETS}
    values[bucket] = new_value
    return split.model_copy(update=values)


def derive_percentages(income_amount: Number, amounts: AllocationAmounts) -> AllocationSplit:
    """Recover the percentages behind a set of amounts (``amount / income * 100``)."""
    income = _positive_income(income_amount)

    def pct(amount: Decimal) -> Decimal:
        return (amount / income * HUNDRED).quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)

    return AllocationSplit(
        needs=pct(amounts.needs_amount),
        wants=pct(amounts.wants_amount),
        savings=pct(amounts.savings_amount),
    )
