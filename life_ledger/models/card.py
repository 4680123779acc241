from pydantic import Field, field_validator
from typing import Optional
from enum import Enum

from life_ledger.models.common import WireModel

# ===== CARD PYDANTIC MODELS =====

class CardType(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"


def last_four(number: Optional[str]) -> str:
    """Keep only the last 4 characters of a card number; the full number is never stored."""
    number = (number or "").strip()
    return number[-4:] if number else "0000"


class CardCreate(WireModel):
    bank_name: str = Field(..., min_length=1, max_length=255)
    holder: str = Field(..., min_length=1, max_length=255)
    balance: float = Field(0)
    limit: Optional[float] = Field(None, ge=0, description="Credit limit, credit cards only")
    type: CardType = Field(CardType.DEBIT)
    number: str = Field("", validate_default=True, description="Card number; only the last 4 characters are kept")
    expiry: str = Field("", max_length=7)
    pin: str = Field("", max_length=8)
    color: str = Field("bg-slate-900", max_length=64)
    is_frozen: bool = False

    @field_validator('number', mode='before')
    @classmethod
    def validate_number(cls, v) -> str:
        return last_four(str(v) if v is not None else None)


class CardUpdate(WireModel):
    bank_name: Optional[str] = Field(None, min_length=1, max_length=255)
    holder: Optional[str] = Field(None, min_length=1, max_length=255)
    balance: Optional[float] = None
    limit: Optional[float] = Field(None, ge=0)
    type: Optional[CardType] = None
    number: Optional[str] = None
    expiry: Optional[str] = Field(None, max_length=7)
    pin: Optional[str] = Field(None, max_length=8)
    color: Optional[str] = Field(None, max_length=64)
    is_frozen: Optional[bool] = None

    @field_validator('number', mode='before')
    @classmethod
    def validate_number(cls, v) -> Optional[str]:
        return last_four(str(v)) if v is not None else v


class CardResponse(CardCreate):
    id: int
