from typing import List

from life_ledger.models.budget import BudgetResponse
from life_ledger.models.common import WireModel


class SetupStatus(WireModel):
    initialized: bool
    missing_categories: List[str]
    existing_budgets: int
    required_budgets: int


class SetupResult(WireModel):
    success: bool = True
    # Number of budgets present after initialization
    initialized: int
    budgets: List[BudgetResponse]
