from pydantic import Field, model_validator
from typing import Optional
from typing_extensions import Self
from datetime import date

from life_ledger.models.common import WireModel

# ===== INSTALLMENT PYDANTIC MODELS =====

class InstallmentCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=255)
    provider: str = Field(..., min_length=1, max_length=255, description="Lender or store financing the plan")
    total_amount: float = Field(..., ge=0)
    paid_amount: float = Field(0, ge=0)
    total_months: int = Field(..., ge=1)
    paid_months: int = Field(0, ge=0)
    start_date: date = Field(default_factory=date.today)
    category: str = Field(..., min_length=1, max_length=100)

    @model_validator(mode="after")
    def check_progress(self) -> Self:
        if self.paid_months > self.total_months:
            raise ValueError("paidMonths cannot exceed totalMonths")
        return self


class InstallmentUpdate(WireModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    provider: Optional[str] = Field(None, min_length=1, max_length=255)
    total_amount: Optional[float] = Field(None, ge=0)
    paid_amount: Optional[float] = Field(None, ge=0)
    total_months: Optional[int] = Field(None, ge=1)
    paid_months: Optional[int] = Field(None, ge=0)
    start_date: Optional[date] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)


class InstallmentResponse(InstallmentCreate):
    id: int


class InstallmentProgress(WireModel):
    id: int
    name: str
    progress: float
    monthly_payment: float
    remaining_amount: float
    remaining_months: int


class InstallmentSummary(WireModel):
    total_debt: float
    monthly_commitment: float
    plans: list[InstallmentProgress]
