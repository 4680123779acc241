from typing import List, Optional

from life_ledger.categories import get_category_color
from life_ledger.db.core import ConflictError
from life_ledger.db.store import Store, Record
from life_ledger.logging_config import get_logger
from life_ledger.models.budget import BudgetCreate, BudgetUpdate

logger = get_logger(__name__)

RESOURCE = "budgets"


def read_db_budgets(store: Store, user_id: Optional[str] = None) -> List[Record]:
    """Read all budgets ordered by category"""
    return sorted(store.list(RESOURCE, user_id=user_id), key=lambda r: r.get("category", ""))


def read_db_budget(store: Store, category: str, user_id: Optional[str] = None) -> Optional[Record]:
    """Read the budget for a category"""
    return store.get(RESOURCE, category, user_id=user_id)


def create_db_budget(store: Store, budget_data: BudgetCreate, default_limit: float,
                     user_id: Optional[str] = None) -> Record:
    """Create a budget for a category that does not have one yet"""
    if read_db_budget(store, budget_data.category, user_id=user_id):
        raise ConflictError(f"Budget for category '{budget_data.category}' already exists")

    # A limit of 0 counts as unset, as does a missing one
    record = {
        "category": budget_data.category,
        "limit": budget_data.limit or default_limit,
        "color": budget_data.color or get_category_color(budget_data.category),
    }
    created = store.insert(RESOURCE, record, user_id=user_id)
    logger.info(f"Created budget for '{budget_data.category}' with limit {created['limit']}")
    return created


def upsert_db_budget(store: Store, budget_data: BudgetUpdate, default_limit: float,
                     user_id: Optional[str] = None) -> Record:
    """Update the budget for a category, creating it when absent"""
    existing = read_db_budget(store, budget_data.category, user_id=user_id)
    if existing is None:
        record = {
            "category": budget_data.category,
            "limit": budget_data.limit if budget_data.limit is not None else default_limit,
            "color": budget_data.color or get_category_color(budget_data.category),
        }
        logger.info(f"No budget for '{budget_data.category}', creating one")
        return store.insert(RESOURCE, record, user_id=user_id)

    changes = {}
    if budget_data.limit is not None:
        changes["limit"] = budget_data.limit
    if budget_data.color:
        changes["color"] = budget_data.color
    return store.update(RESOURCE, budget_data.category, changes, user_id=user_id)
