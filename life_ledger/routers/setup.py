from fastapi import APIRouter, Depends
from typing import Optional

from life_ledger.config import Settings, get_settings
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import setup as setup_models
from life_ledger.services import setup as setup_service

router = APIRouter(
    prefix="/setup",
    tags=["setup"],
)


@router.get("", response_model=setup_models.SetupStatus)
def read_setup_status(
    category_store: Store = Depends(store_for("categories")),
    budget_store: Store = Depends(store_for("budgets")),
    user_id: Optional[str] = Depends(user_for("categories")),
    budget_user_id: Optional[str] = Depends(user_for("budgets")),
):
    """
    Report whether the current user has been initialized with default categories.
    """
    return setup_service.get_setup_status(category_store, budget_store, user_id, budget_user_id=budget_user_id)


@router.post("", response_model=setup_models.SetupResult)
def run_setup(
    category_store: Store = Depends(store_for("categories")),
    budget_store: Store = Depends(store_for("budgets")),
    user_id: Optional[str] = Depends(user_for("categories")),
    budget_user_id: Optional[str] = Depends(user_for("budgets")),
    settings: Settings = Depends(get_settings),
):
    """
    Create the default categories and budgets the current user is missing.
    """
    return setup_service.initialize_defaults(
        category_store, budget_store, settings, user_id, budget_user_id=budget_user_id
    )
