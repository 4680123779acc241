from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from life_ledger.config import Settings, get_settings
from life_ledger.crud import crud_budget
from life_ledger.db.core import ConflictError
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import budget as budget_models

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
)

RESOURCE = crud_budget.RESOURCE


@router.get("", response_model=List[budget_models.BudgetResponse])
def read_budgets(
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Retrieve all budgets ordered by category.
    """
    return crud_budget.read_db_budgets(store, user_id=user_id)


@router.post("", response_model=budget_models.BudgetResponse)
def create_budget(
    budget: budget_models.BudgetCreate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
    settings: Settings = Depends(get_settings),
):
    """
    Create a budget for a category. A category can only have one budget.
    """
    try:
        return crud_budget.create_db_budget(store, budget, settings.default_budget_limit, user_id=user_id)
    except ConflictError as e:
        # Duplicate categories are reported as a bad request, unlike task categories
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put("", response_model=budget_models.BudgetResponse)
def update_budget(
    budget: budget_models.BudgetUpdate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
    settings: Settings = Depends(get_settings),
):
    """
    Update the budget for the category in the body, creating it if needed.
    """
    return crud_budget.upsert_db_budget(store, budget, settings.default_budget_limit, user_id=user_id)
