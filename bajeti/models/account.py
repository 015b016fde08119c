from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from typing_extensions import Self

from bajeti.db.core import AccountType
from bajeti.services.money import normalize_currency, quantize


# ===== ACCOUNT (WALLET) PYDANTIC MODELS =====

class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Wallet name")
    account_type: AccountType = Field(..., description="bank, mobile, loan or cash")
    currency: str = Field(..., description="ISO currency code of the balance")
    balance: Decimal = Field(default=Decimal('0.00'), description="Current balance snapshot")
    credit_limit: Optional[Decimal] = Field(None, ge=0, description="Loan limit (loan wallets only)")
    institution: Optional[str] = Field(None, max_length=255, description="Bank or provider name")
    account_mask: Optional[str] = Field(None, min_length=4, max_length=4, description="Last 4 digits of account number")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return v.strip()

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return normalize_currency(v)

    @field_validator('account_mask')
    @classmethod
    def validate_account_mask(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.isdigit():
            raise ValueError('Account mask must be numeric')
        return v

    @model_validator(mode="after")
    def quantize_amounts(self) -> Self:
        self.balance = quantize(self.balance, self.currency)
        if self.credit_limit is not None:
            self.credit_limit = quantize(self.credit_limit, self.currency)
        return self


class AccountUpdate(BaseModel):
    """Update wallet - all fields optional"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    balance: Optional[Decimal] = Field(None, description="New balance snapshot")
    credit_limit: Optional[Decimal] = Field(None, ge=0)
    institution: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class AccountResponse(BaseModel):
    id: int
    user_id: int
    name: str
    account_type: AccountType
    currency: str
    balance: Decimal
    credit_limit: Optional[Decimal] = None
    institution: Optional[str] = None
    account_mask: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoanCredit(BaseModel):
    account_id: int
    name: str
    balance: Decimal
    credit_limit: Optional[Decimal] = None
    available_credit: Optional[Decimal] = None


class CurrencyWalletSummary(BaseModel):
    """Balances of one currency across a user's wallets"""
    currency: str
    assets: Decimal
    liabilities: Decimal
    net_worth: Decimal
    account_count: int
    loans: List[LoanCredit] = []
