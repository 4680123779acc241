from pydantic import Field, field_validator
from typing import Optional
from enum import Enum

from life_ledger.models.common import WireModel

# ===== FINANCE CATEGORY PYDANTIC MODELS =====

class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class CategoryCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=100, description="Category name")
    type: CategoryType = Field(CategoryType.EXPENSE)
    icon: Optional[str] = Field(None, max_length=32)
    color: Optional[str] = Field(None, max_length=32)
    budgeting_enabled: bool = True

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return v.strip()


class CategoryUpdate(WireModel):
    """PUT body; the id travels in the body rather than the path."""
    id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[CategoryType] = None
    icon: Optional[str] = Field(None, max_length=32)
    color: Optional[str] = Field(None, max_length=32)
    budgeting_enabled: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class CategoryResponse(WireModel):
    id: int
    name: str
    type: CategoryType
    icon: Optional[str] = None
    color: Optional[str] = None
    budgeting_enabled: bool = True
