from typing import List, Optional, Dict, Any

from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store, Record
from life_ledger.logging_config import get_logger
from life_ledger.models.task import TaskCreate, TaskUpdate

logger = get_logger(__name__)

RESOURCE = "tasks"


def number_subtasks(subtasks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Assign subtask ids 1..n in list order"""
    return [
        {"id": position, "title": subtask["title"], "completed": bool(subtask.get("completed", False))}
        for position, subtask in enumerate(subtasks, start=1)
    ]


def create_db_task(store: Store, task_data: TaskCreate, user_id: Optional[str] = None) -> Record:
    """Create a new task with its subtasks"""
    record = task_data.to_wire()
    record["subtasks"] = number_subtasks(record["subtasks"])
    created = store.insert(RESOURCE, record, user_id=user_id)
    logger.info(f"Created task {created['id']} with {len(created['subtasks'])} subtasks")
    return created


def read_db_tasks(store: Store, user_id: Optional[str] = None) -> List[Record]:
    """Read all tasks, newest first"""
    return sorted(store.list(RESOURCE, user_id=user_id), key=lambda r: r.get("id") or 0, reverse=True)


def update_db_task(store: Store, task_id: int, task_updates: TaskUpdate, user_id: Optional[str] = None) -> Record:
    """
    Shallow-merge the provided fields into a task.

    A provided ``subtasks`` list replaces the stored list wholesale and is
    renumbered; omitting it leaves the stored subtasks untouched.
    """
    changes = task_updates.to_wire(exclude_unset=True)
    if "subtasks" in changes:
        changes["subtasks"] = number_subtasks(changes["subtasks"] or [])

    updated = store.update(RESOURCE, task_id, changes, user_id=user_id)
    if updated is None:
        raise NotFoundError(f"Task with id {task_id} not found")
    logger.debug(f"Updated task {task_id}: {sorted(changes)}")
    return updated


def delete_db_task(store: Store, task_id: int, user_id: Optional[str] = None) -> bool:
    """Delete a task together with its subtasks"""
    return store.delete(RESOURCE, task_id, user_id=user_id)
