"""
First-run initialization: default finance categories and one budget per
expense category. Both operations only add what is missing, so running setup
again is harmless.
"""
from typing import Optional

from life_ledger.categories import (
    EXPENSE_CATEGORIES, INCOME_CATEGORIES, DEFAULT_BUDGET_LIMITS, get_category_color,
)
from life_ledger.config import Settings
from life_ledger.crud import crud_budget, crud_category
from life_ledger.db.store import Store
from life_ledger.logging_config import get_logger
from life_ledger.models.budget import BudgetResponse
from life_ledger.models.category import CategoryType
from life_ledger.models.setup import SetupStatus, SetupResult

logger = get_logger(__name__)

DEFAULT_CATEGORIES = (
    [(config, CategoryType.EXPENSE) for config in EXPENSE_CATEGORIES]
    + [(config, CategoryType.INCOME) for config in INCOME_CATEGORIES]
)


def get_setup_status(category_store: Store, budget_store: Store, user_id: Optional[str],
                     budget_user_id: Optional[str] = None) -> SetupStatus:
    """The user is initialized once they own at least one finance category."""
    categories = crud_category.read_db_categories(category_store, user_id=user_id)
    existing_names = {c.get("name") for c in categories}
    budgets = crud_budget.read_db_budgets(budget_store, user_id=budget_user_id)

    return SetupStatus(
        initialized=len(categories) > 0,
        missing_categories=[config.value for config, _ in DEFAULT_CATEGORIES if config.value not in existing_names],
        existing_budgets=len(budgets),
        required_budgets=len(EXPENSE_CATEGORIES),
    )


def initialize_defaults(category_store: Store, budget_store: Store, settings: Settings, user_id: Optional[str],
                        budget_user_id: Optional[str] = None) -> SetupResult:
    """Insert the default categories the user lacks, then a budget for every budgeted expense category."""
    existing_names = {c.get("name") for c in crud_category.read_db_categories(category_store, user_id=user_id)}
    for config, category_type in DEFAULT_CATEGORIES:
        if config.value in existing_names:
            continue
        category_store.insert(crud_category.RESOURCE, {
            "name": config.value,
            "type": category_type.value,
            "icon": config.icon,
            "color": config.color,
            "budgetingEnabled": True,
        }, user_id=user_id)
        logger.debug(f"Added default category '{config.value}' for user {user_id}")

    budgeted = {b.get("category") for b in crud_budget.read_db_budgets(budget_store, user_id=budget_user_id)}
    for category in crud_category.read_db_categories(category_store, user_id=user_id):
        name = category.get("name")
        if category.get("type") != CategoryType.EXPENSE.value or not category.get("budgetingEnabled", True):
            continue
        if name in budgeted:
            continue
        budget_store.insert(crud_budget.RESOURCE, {
            "category": name,
            "limit": DEFAULT_BUDGET_LIMITS.get(name, settings.default_budget_limit),
            "color": category.get("color") or get_category_color(name),
        }, user_id=budget_user_id)
        budgeted.add(name)

    budgets = [
        BudgetResponse.model_validate(record)
        for record in crud_budget.read_db_budgets(budget_store, user_id=budget_user_id)
    ]
    logger.info(f"Setup complete for user {user_id}: {len(budgets)} budgets")
    return SetupResult(success=True, initialized=len(budgets), budgets=budgets)
