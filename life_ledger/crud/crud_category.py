from typing import List, Optional

from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store, Record
from life_ledger.logging_config import get_logger
from life_ledger.models.category import CategoryCreate, CategoryUpdate

logger = get_logger(__name__)

RESOURCE = "categories"


def create_db_category(store: Store, category_data: CategoryCreate, user_id: Optional[str] = None) -> Record:
    """Create a new finance category for the user"""
    record = store.insert(RESOURCE, category_data.to_wire(), user_id=user_id)
    logger.info(f"Created {record['type']} category '{record['name']}'")
    return record


def read_db_categories(store: Store, user_id: Optional[str] = None) -> List[Record]:
    """Read the user's finance categories in creation order"""
    return sorted(store.list(RESOURCE, user_id=user_id), key=lambda r: r.get("id") or 0)


def update_db_category(store: Store, category_updates: CategoryUpdate, user_id: Optional[str] = None) -> Record:
    """Update a category identified by the id carried in the body"""
    if category_updates.id is None:
        raise ValueError("Category ID is required")

    changes = category_updates.to_wire(exclude_unset=True)
    changes.pop("id", None)
    updated = store.update(RESOURCE, category_updates.id, changes, user_id=user_id)
    if updated is None:
        raise NotFoundError(f"Category with id {category_updates.id} not found")
    return updated


def delete_db_category(store: Store, category_id: int, user_id: Optional[str] = None) -> bool:
    """Delete a category; budgets and transactions referencing it by name are left alone"""
    return store.delete(RESOURCE, category_id, user_id=user_id)
