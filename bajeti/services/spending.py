"""
Category spend aggregation.

Groups a month's transactions by category and reports totals, counts and each
category's share of the month's spending.
"""
import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional

from bajeti.db.core import TransactionKind
from bajeti.errors import ValidationError
from bajeti.models.budget import CategorySpend
from bajeti.models.category import CategoryResponse
from bajeti.models.transaction import TransactionResponse
from bajeti.services.money import normalize_currency, quantize


UNCATEGORIZED = "Uncategorized"
MIN_YEAR = 1970
MAX_YEAR = 2100


@dataclass(frozen=True)
class Period:
    """A calendar month."""
    month: int
    year: int

    def __post_init__(self):
        if isinstance(self.month, bool) or not isinstance(self.month, int) or not 1 <= self.month <= 12:
            raise ValidationError(f"month must be between 1 and 12, got {self.month!r}",
                                  field="month", constraint="range")
        if isinstance(self.year, bool) or not isinstance(self.year, int) or not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValidationError(f"year must be between {MIN_YEAR} and {MAX_YEAR}, got {self.year!r}",
                                  field="year", constraint="range")

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    @property
    def days(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def previous(self) -> "Period":
        if self.month == 1:
            return Period(month=12, year=self.year - 1)
        return Period(month=self.month - 1, year=self.year)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """``part / whole * 100`` to two places; 0 when ``whole`` is zero."""
    if not whole:
        return Decimal("0.00")
    return (part / whole * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class _Bucket:
    __slots__ = ("category_id", "name", "total", "count", "first", "last")

    def __init__(self, category_id: Optional[int], name: str):
        self.category_id = category_id
        self.name = name
        self.total = Decimal("0")
        self.count = 0
        self.first: Optional[date] = None
        self.last: Optional[date] = None

    def add(self, amount: Decimal, day: date) -> None:
        self.total += amount
        self.count += 1
        if self.first is None or day < self.first:
            self.first = day
        if self.last is None or day > self.last:
            self.last = day


def aggregate(transactions: Iterable[TransactionResponse],
              categories: Iterable[CategoryResponse],
              period: Period,
              currency: str,
              include_income: bool = False) -> List[CategorySpend]:
    """
    Total a month's spending per category.

    Only transactions dated inside ``period`` count, and only expenses unless
    ``include_income`` is set. Transactions with no category, or a category
    missing from ``categories``, are collected in an "Uncategorized" bucket.

    Results are ordered by total descending, then by category name.
    """
    code = normalize_currency(currency)
    names: Dict[int, str] = {c.id: c.name for c in categories}

    buckets: Dict[Optional[int], _Bucket] = {}
    for txn in transactions:
        if not period.contains(txn.transaction_date):
            continue
        if txn.kind == TransactionKind.INCOME and not include_income:
            continue

        key = txn.category_id if txn.category_id in names else None
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = _Bucket(key, names[key] if key is not None else UNCATEGORIZED)
        bucket.add(txn.amount, txn.transaction_date)

    grand_total = sum((b.total for b in buckets.values()), Decimal("0"))

    results = [
        CategorySpend(
            category_id=b.category_id,
            category_name=b.name,
            total_spent=quantize(b.total, code),
            transaction_count=b.count,
            percentage_of_total=percentage(b.total, grand_total),
            first_transaction_date=b.first,
            last_transaction_date=b.last,
            currency=code,
        )
        for b in buckets.values()
    ]
    results.sort(key=lambda s: (-s.total_spent, s.category_name))
    return results


def total_spent(spend: Iterable[CategorySpend]) -> Decimal:
    return sum((s.total_spent for s in spend), Decimal("0"))
