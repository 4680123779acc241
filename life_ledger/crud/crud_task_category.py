from typing import List, Optional

from life_ledger.db.core import ConflictError, NotFoundError
from life_ledger.db.store import Store, Record
from life_ledger.logging_config import get_logger
from life_ledger.models.task_category import TaskCategoryCreate, TaskCategoryUpdate

logger = get_logger(__name__)

RESOURCE = "task_categories"

DUPLICATE_NAME_MESSAGE = "Category with this name already exists"


def _name_taken(store: Store, name: str, user_id: Optional[str], exclude_id: Optional[int] = None) -> bool:
    return any(
        r.get("name") == name and r.get("id") != exclude_id
        for r in store.list(RESOURCE, user_id=user_id)
    )


def create_db_task_category(store: Store, category_data: TaskCategoryCreate, user_id: Optional[str] = None) -> Record:
    """Create a task category; names are unique per user"""
    # The unique constraint still arbitrates concurrent inserts; this check
    # covers backends without one.
    if _name_taken(store, category_data.name, user_id):
        raise ConflictError(DUPLICATE_NAME_MESSAGE)
    try:
        return store.insert(RESOURCE, category_data.to_wire(), user_id=user_id)
    except ConflictError as e:
        raise ConflictError(DUPLICATE_NAME_MESSAGE) from e


def read_db_task_categories(store: Store, user_id: Optional[str] = None) -> List[Record]:
    """Read the user's task categories in creation order"""
    return sorted(store.list(RESOURCE, user_id=user_id), key=lambda r: r.get("id") or 0)


def update_db_task_category(store: Store, category_id: int, category_updates: TaskCategoryUpdate,
                            user_id: Optional[str] = None) -> Record:
    """Update a task category's name, color or icon"""
    changes = category_updates.to_wire(exclude_unset=True)
    if "name" in changes and _name_taken(store, changes["name"], user_id, exclude_id=category_id):
        raise ConflictError(DUPLICATE_NAME_MESSAGE)
    try:
        updated = store.update(RESOURCE, category_id, changes, user_id=user_id)
    except ConflictError as e:
        raise ConflictError(DUPLICATE_NAME_MESSAGE) from e
    if updated is None:
        raise NotFoundError(f"Task category with id {category_id} not found")
    return updated


def delete_db_task_category(store: Store, category_id: int, user_id: Optional[str] = None) -> bool:
    """Delete a task category; tasks keep their category name"""
    return store.delete(RESOURCE, category_id, user_id=user_id)
