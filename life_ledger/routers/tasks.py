from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from life_ledger.crud import crud_task
from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import task as task_models
from life_ledger.models.common import SuccessResponse

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)

RESOURCE = crud_task.RESOURCE


@router.get("", response_model=List[task_models.TaskResponse])
def read_tasks(
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Retrieve all tasks with their subtasks, newest first.
    """
    return crud_task.read_db_tasks(store, user_id=user_id)


@router.post("", response_model=task_models.TaskResponse)
def create_task(
    task: task_models.TaskCreate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Create a task. Subtasks are numbered in the order given.
    """
    return crud_task.create_db_task(store, task, user_id=user_id)


@router.put("/{task_id}", response_model=task_models.TaskResponse)
def update_task(
    task_id: int,
    task: task_models.TaskUpdate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Merge the provided fields into a task. Unlike budgets, a missing task is a 404.
    """
    try:
        return crud_task.update_db_task(store, task_id, task, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{task_id}", response_model=SuccessResponse)
def delete_task(
    task_id: int,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Delete a task. Succeeds whether or not it existed.
    """
    crud_task.delete_db_task(store, task_id, user_id=user_id)
    return SuccessResponse()
