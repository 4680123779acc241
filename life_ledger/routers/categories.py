from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from life_ledger.crud import crud_category
from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import category as category_models
from life_ledger.models.common import SuccessResponse

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
)

RESOURCE = crud_category.RESOURCE


@router.get("", response_model=List[category_models.CategoryResponse])
def read_categories(
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Retrieve the current user's finance categories.
    """
    return crud_category.read_db_categories(store, user_id=user_id)


@router.post("", response_model=category_models.CategoryResponse)
def create_category(
    category: category_models.CategoryCreate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Create a finance category for the current user.
    """
    return crud_category.create_db_category(store, category, user_id=user_id)


@router.put("", response_model=category_models.CategoryResponse)
def update_category(
    category: category_models.CategoryUpdate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Update the category whose id is given in the body.
    """
    try:
        return crud_category.update_db_category(store, category, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{category_id}", response_model=SuccessResponse)
def delete_category(
    category_id: int,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Delete a finance category. Succeeds whether or not it existed.
    """
    crud_category.delete_db_category(store, category_id, user_id=user_id)
    return SuccessResponse()
