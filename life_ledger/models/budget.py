from pydantic import Field, field_validator
from typing import Optional

from life_ledger.models.common import WireModel

# ===== BUDGET PYDANTIC MODELS =====

class BudgetBase(WireModel):
    category: str = Field(..., min_length=1, max_length=100, description="Expense category, unique per budget")

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: str) -> str:
        return v.strip()


class BudgetCreate(BudgetBase):
    limit: Optional[float] = Field(None, ge=0, description="Monthly limit; the configured default when omitted")
    color: Optional[str] = Field(None, max_length=32)

    @field_validator('limit')
    @classmethod
    def validate_limit(cls, v: Optional[float]) -> Optional[float]:
        return round(v, 2) if v is not None else v


class BudgetUpdate(BudgetCreate):
    """PUT body; the category doubles as the lookup key."""
    pass


class BudgetResponse(BudgetBase):
    limit: float
    color: Optional[str] = None


class CategoryStat(BudgetResponse):
    """Budget joined with what was spent against it."""
    spent: float
    remaining: float
    percent: float
    is_over_budget: bool
