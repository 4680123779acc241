from pydantic import Field, field_validator
import datetime as dt
from enum import Enum

from life_ledger.models.common import WireModel

# ===== TRANSACTION PYDANTIC MODELS =====

class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=255, description="What the money was for")
    category: str = Field(..., min_length=1, max_length=100, description="Category name, usually from the configured list")
    date: dt.date = Field(..., description="Calendar date of the transaction")
    amount: float = Field(..., description="Magnitude of the transaction")
    type: TransactionType = Field(..., description="income or expense")
    icon: str = Field("💳", max_length=32)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: float) -> float:
        # Direction lives in ``type``; the amount is always a magnitude
        return round(abs(v), 2)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return v.strip()


class TransactionResponse(TransactionCreate):
    id: int
