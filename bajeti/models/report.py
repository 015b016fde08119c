from pydantic import BaseModel
from decimal import Decimal

# ===== REPORT PYDANTIC MODELS =====

class FinancialSummary(BaseModel):
    """Income vs expenses for one month"""
    month: int
    year: int
    currency: str
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    savings_rate: Decimal  # balance as a percentage of income
    monthly_change: Decimal  # expense change vs previous month, in percent
    transaction_count: int

class MonthlyTrendPoint(BaseModel):
    month: int
    year: int
    currency: str
    income: Decimal
    expenses: Decimal
    net: Decimal
