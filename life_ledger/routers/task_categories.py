from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from life_ledger.crud import crud_task_category
from life_ledger.db.core import ConflictError, NotFoundError
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import task_category as task_category_models
from life_ledger.models.common import SuccessResponse

router = APIRouter(
    prefix="/task-categories",
    tags=["task-categories"],
)

RESOURCE = crud_task_category.RESOURCE


@router.get("", response_model=List[task_category_models.TaskCategoryResponse])
def read_task_categories(
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Retrieve the current user's task categories in creation order.
    """
    return crud_task_category.read_db_task_categories(store, user_id=user_id)


@router.post("", response_model=task_category_models.TaskCategoryResponse)
def create_task_category(
    category: task_category_models.TaskCategoryCreate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Create a task category. Names are unique per user; a duplicate is a 409.
    """
    try:
        return crud_task_category.create_db_task_category(store, category, user_id=user_id)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.put("/{category_id}", response_model=task_category_models.TaskCategoryResponse)
def update_task_category(
    category_id: int,
    category: task_category_models.TaskCategoryUpdate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Rename or recolor a task category.
    """
    try:
        return crud_task_category.update_db_task_category(store, category_id, category, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete("/{category_id}", response_model=SuccessResponse)
def delete_task_category(
    category_id: int,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Delete a task category. Succeeds whether or not it existed.
    """
    crud_task_category.delete_db_task_category(store, category_id, user_id=user_id)
    return SuccessResponse()
