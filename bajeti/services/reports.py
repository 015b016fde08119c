"""
Dashboard reports: monthly income/expense summary and trends.
"""
from decimal import Decimal
from typing import Iterable, List, Tuple

from bajeti.db.core import TransactionKind
from bajeti.errors import ValidationError
from bajeti.models.report import FinancialSummary, MonthlyTrendPoint
from bajeti.models.transaction import TransactionResponse
from bajeti.services.money import normalize_currency, quantize
from bajeti.services.spending import Period, percentage


def _totals(transactions: Iterable[TransactionResponse], period: Period) -> Tuple[Decimal, Decimal, int]:
    income = Decimal("0")
    expenses = Decimal("0")
    count = 0
    for txn in transactions:
        if not period.contains(txn.transaction_date):
            continue
        count += 1
        if txn.kind == TransactionKind.INCOME:
            income += txn.amount
        else:
            expenses += txn.amount
    return income, expenses, count


def summarize_month(transactions: Iterable[TransactionResponse], period: Period, currency: str) -> FinancialSummary:
    """Income, expenses, balance and savings rate for a month, with the change in spending since last month."""
    code = normalize_currency(currency)
    transactions = list(transactions)

    income, expenses, count = _totals(transactions, period)
    _, previous_expenses, _ = _totals(transactions, period.previous())

    balance = income - expenses
    if previous_expenses:
        monthly_change = percentage(expenses - previous_expenses, previous_expenses)
    else:
        monthly_change = Decimal("0.00")

    return FinancialSummary(
        month=period.month,
        year=period.year,
        currency=code,
        total_income=quantize(income, code),
        total_expenses=quantize(expenses, code),
        balance=quantize(balance, code),
        savings_rate=percentage(balance, income),
        monthly_change=monthly_change,
        transaction_count=count,
    )


def monthly_trends(transactions: Iterable[TransactionResponse], end_period: Period,
                   months: int, currency: str) -> List[MonthlyTrendPoint]:
    """Income and expenses for the ``months`` months ending with ``end_period``, oldest first."""
    code = normalize_currency(currency)
    if months < 1 or months > 60:
        raise ValidationError(f"months must be between 1 and 60, got {months}", field="months", constraint="range")

    transactions = list(transactions)
    periods = [end_period]
    while len(periods) < months:
        periods.append(periods[-1].previous())

    points = []
    for period in reversed(periods):
        income, expenses, _ = _totals(transactions, period)
        points.append(MonthlyTrendPoint(
            month=period.month,
            year=period.year,
            currency=code,
            income=quantize(income, code),
            expenses=quantize(expenses, code),
            net=quantize(income - expenses, code),
        ))
    return points
