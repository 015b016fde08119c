from pydantic import BaseModel, Field, field_validator, model_validator, computed_field
from typing import Optional, Any
from datetime import datetime, date
from decimal import Decimal
from enum import Enum

from bajeti.db.core import TransactionKind
from bajeti.models.category import CategoryResponse

# ===== TRANSACTION PYDANTIC MODELS =====

_LEGACY_TYPES = {"income": TransactionKind.INCOME, "expense": TransactionKind.EXPENSE}


def _kind_from_legacy(data: dict) -> Optional[TransactionKind]:
    """Resolve the kind from the older is_income/type pair, which must agree."""
    candidates = []
    if data.get('is_income') is not None:
        candidates.append(TransactionKind.INCOME if data['is_income'] else TransactionKind.EXPENSE)
    if data.get('type') is not None:
        legacy_type = str(data['type']).strip().lower()
        if legacy_type not in _LEGACY_TYPES:
            raise ValueError(f"type must be 'income' or 'expense', got '{data['type']}'")
        candidates.append(_LEGACY_TYPES[legacy_type])
    if data.get('kind') is not None:
        kind = data['kind']
        candidates.append(kind if isinstance(kind, Enum) else TransactionKind(str(kind).upper()))
    if len(set(candidates)) > 1:
        raise ValueError('is_income, type and kind disagree about the transaction direction')
    return candidates[0] if candidates else None


class TransactionCreate(BaseModel):
    kind: TransactionKind = Field(..., description="INCOME or EXPENSE")
    amount: Decimal = Field(..., gt=0, description="Positive transaction amount")
    transaction_date: date = Field(..., description="Date of the transaction")
    category_id: Optional[int] = Field(None, description="The ID of the transaction's category")
    account_id: Optional[int] = Field(None, description="Wallet the transaction belongs to")
    description: Optional[str] = Field(None, max_length=500, description="Transaction description")
    notes: Optional[str] = Field(None, description="User notes")
    frequency: Optional[str] = Field(None, max_length=20, description="Income cadence, e.g. monthly")

    @model_validator(mode="before")
    @classmethod
    def resolve_kind(cls, data: Any) -> Any:
        if isinstance(data, dict):
            kind = _kind_from_legacy(data)
            if kind is not None:
                data = {k: v for k, v in data.items() if k not in ('is_income', 'type')}
                data['kind'] = kind
        return data

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class TransactionResponse(BaseModel):
    id: int
    user_id: int
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    kind: TransactionKind
    amount: Decimal
    transaction_date: date
    description: Optional[str] = None
    notes: Optional[str] = None
    frequency: Optional[str] = None
    created_at: Optional[datetime] = None
    category: Optional[CategoryResponse] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME

    @computed_field
    @property
    def type(self) -> str:
        return self.kind.value.lower()
