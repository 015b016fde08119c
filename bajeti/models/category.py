from pydantic import BaseModel, Field, field_validator
from typing import Optional

# ===== CATEGORY PYDANTIC MODELS =====

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Category name")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Category name cannot be blank')
        return v

class CategoryResponse(BaseModel):
    id: int
    name: str
    is_system: bool = False
    user_id: Optional[int] = None

    class Config:
        from_attributes = True
