from pydantic import Field, field_validator
from typing import Optional

from life_ledger.models.common import WireModel

# ===== TASK CATEGORY PYDANTIC MODELS =====

class TaskCategoryCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=100, description="Unique per user")
    color: Optional[str] = Field(None, max_length=32)
    icon: Optional[str] = Field(None, max_length=32)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return v.strip()


class TaskCategoryUpdate(WireModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, max_length=32)
    icon: Optional[str] = Field(None, max_length=32)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class TaskCategoryResponse(TaskCategoryCreate):
    id: int
