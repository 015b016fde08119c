from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from typing_extensions import Self

from bajeti.db.core import AllocationType
from bajeti.models.category import CategoryResponse
from bajeti.services.money import normalize_currency, quantize

# ===== BUDGET PYDANTIC MODELS =====

class AllocationSplit(BaseModel):
    """Needs/wants/savings percentages. Range and sum are checked by the allocator."""
    needs: Decimal = Field(..., description="Percentage for needs")
    wants: Decimal = Field(..., description="Percentage for wants")
    savings: Decimal = Field(..., description="Percentage for savings")

class AllocationAmounts(BaseModel):
    needs_amount: Decimal
    wants_amount: Decimal
    savings_amount: Decimal
    currency: str

    @property
    def total(self) -> Decimal:
        return self.needs_amount + self.wants_amount + self.savings_amount

class AllocationPreviewRequest(BaseModel):
    income_amount: Decimal
    split: AllocationSplit
    currency: str

class RebalanceRequest(BaseModel):
    split: AllocationSplit
    changed: AllocationType = Field(..., description="The slider the user moved")
    value: Decimal = Field(..., description="Its new percentage")

class BudgetCategoryCreate(BaseModel):
    category_id: Optional[int] = Field(None, description="The ID of the category")
    amount: Decimal = Field(..., ge=0, description="Allocated budget amount")
    allocation_type: Optional[AllocationType] = Field(None, description="needs, wants or savings")

class BudgetCreate(BaseModel):
    month: int = Field(..., description="Calendar month, 1-12")
    year: int = Field(..., description="Calendar year")
    currency: str = Field(..., description="Currency of every amount in this budget")
    income_amount: Optional[Decimal] = Field(None, description="Income to split into needs/wants/savings")
    split: Optional[AllocationSplit] = Field(None, description="Needs/wants/savings percentages")
    categories: List[BudgetCategoryCreate] = Field(default_factory=list, description="Per-category allocations")

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return normalize_currency(v)

    @field_validator('categories')
    @classmethod
    def validate_categories(cls, v: List[BudgetCategoryCreate]) -> List[BudgetCategoryCreate]:
        category_ids = [cat.category_id for cat in v if cat.category_id is not None]
        if len(category_ids) != len(set(category_ids)):
            raise ValueError('Duplicate category IDs are not allowed')
        return v

    @model_validator(mode="after")
    def check_has_allocations(self) -> Self:
        if (self.income_amount is None) != (self.split is None):
            raise ValueError('income_amount and split must be given together')
        if self.split is None and not self.categories:
            raise ValueError('A budget needs a split or at least one category allocation')
        # Amounts are stored in the currency's minor unit
        if self.income_amount is not None:
            self.income_amount = quantize(self.income_amount, self.currency)
        for category in self.categories:
            category.amount = quantize(category.amount, self.currency)
        return self

class BudgetCategoryResponse(BaseModel):
    id: int
    budget_id: Optional[int] = None
    category_id: Optional[int] = None
    amount: Decimal
    allocation_type: Optional[AllocationType] = None
    created_at: Optional[datetime] = None
    category: Optional[CategoryResponse] = None

    class Config:
        from_attributes = True

class BudgetAllocationResponse(BaseModel):
    income_amount: Decimal
    needs_percentage: Decimal
    wants_percentage: Decimal
    savings_percentage: Decimal
    needs_amount: Decimal
    wants_amount: Decimal
    savings_amount: Decimal

    class Config:
        from_attributes = True

class BudgetResponse(BaseModel):
    id: int
    user_id: int
    month: int
    year: int
    currency: str
    created_at: Optional[datetime] = None
    budget_categories: Optional[List[BudgetCategoryResponse]] = None
    allocation: Optional[BudgetAllocationResponse] = None

    class Config:
        from_attributes = True

class BudgetSummary(BaseModel):
    """Budget without its category rows. ``allocation`` is the needs/wants/savings split, if one was set."""
    id: int
    user_id: int
    month: int
    year: int
    currency: str
    allocation: Optional[BudgetAllocationResponse] = None

    class Config:
        from_attributes = True

# ===== AGGREGATION MODELS =====

class CategorySpend(BaseModel):
    category_id: Optional[int]  # None for the Uncategorized bucket
    category_name: str
    total_spent: Decimal
    transaction_count: int
    percentage_of_total: Decimal
    first_transaction_date: Optional[date] = None
    last_transaction_date: Optional[date] = None
    currency: str

class RollupLine(BaseModel):
    """Budget-vs-actual for one category"""
    budget_category_id: Optional[int] = None  # None for unbudgeted spend
    category_id: Optional[int] = None
    category_name: str
    allocation_type: Optional[AllocationType] = None
    allocated: Decimal
    spent: Decimal
    remaining: Decimal  # negative when overspent
    percentage_used: Decimal

class MonthlyRollup(BaseModel):
    month: int
    year: int
    currency: str
    budget: Optional[BudgetSummary] = None
    allocations: List[RollupLine] = []
    unbudgeted: List[RollupLine] = []
    spend_by_category: List[CategorySpend] = []
    total_allocated: Decimal
    total_spent: Decimal
    remaining: Decimal
    percentage_used: Decimal
    days_left: int = 0
    daily_budget: Decimal
