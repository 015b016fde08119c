from pydantic import BaseModel, Field, model_validator, field_validator
from typing import Optional
from datetime import datetime
from typing_extensions import Self
import re

from bajeti.services.money import normalize_currency


# ===== USER PYDANTIC MODELS =====

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
THEMES = ("light", "dark", "system")


def _check_currency(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    return normalize_currency(v)


class UserCreate(BaseModel):
    email: str = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="Password (minimum 8 characters)")
    confirm_password: str = Field(..., description="Password confirmation")
    full_name: Optional[str] = Field(None, max_length=255)
    currency: str = Field(..., description="Preferred ISO currency code, e.g. TZS")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not re.match(EMAIL_PATTERN, v.strip()):
            raise ValueError('Invalid email format')
        return v.lower().strip()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not re.search(r'[A-Za-z]', v) or not re.search(r'\d', v):
            raise ValueError('Password must contain at least one letter and one number')
        return v

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return _check_currency(v)

    @model_validator(mode="after")
    def check_passwords_match(self) -> Self:
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserUpdate(BaseModel):
    """Profile and settings update - all fields optional"""
    full_name: Optional[str] = Field(None, max_length=255)
    currency: Optional[str] = None
    language: Optional[str] = Field(None, min_length=2, max_length=50)
    theme: Optional[str] = None
    notify_email: Optional[bool] = None
    notify_push: Optional[bool] = None
    notify_sms: Optional[bool] = None

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return _check_currency(v)

    @field_validator('theme')
    @classmethod
    def validate_theme(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        if v not in THEMES:
            raise ValueError(f"theme must be one of {', '.join(THEMES)}")
        return v


class UserResponse(BaseModel):
    """User data returned to client - no credentials"""
    id: int
    email: str
    full_name: Optional[str]
    currency: str
    language: str
    theme: str
    notify_email: bool
    notify_push: bool
    notify_sms: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    email: str = Field(..., description="User's email")
    password: str = Field(..., description="User's password")

    @field_validator('email')
    @classmethod
    def validate_login_identifier(cls, v: str) -> str:
        return v.lower().strip()
