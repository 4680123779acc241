from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from life_ledger.config import Settings, get_settings
from life_ledger.crud import crud_installment
from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import installment as installment_models
from life_ledger.models.common import SuccessResponse

router = APIRouter(
    prefix="/installments",
    tags=["installments"],
)

RESOURCE = crud_installment.RESOURCE


def require_installment_updates(settings: Settings = Depends(get_settings)) -> None:
    if not settings.allow_installment_updates:
        raise HTTPException(status_code=status.HTTP_405_METHOD_NOT_ALLOWED, detail="Installment updates are disabled")


@router.get("", response_model=List[installment_models.InstallmentResponse])
def read_installments(
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Retrieve all installment plans, most recently started first.
    """
    return crud_installment.read_db_installments(store, user_id=user_id)


@router.post("", response_model=installment_models.InstallmentResponse)
def create_installment(
    installment: installment_models.InstallmentCreate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Create an installment plan.
    """
    return crud_installment.create_db_installment(store, installment, user_id=user_id)


@router.put("/{installment_id}", response_model=installment_models.InstallmentResponse,
            dependencies=[Depends(require_installment_updates)])
def update_installment(
    installment_id: int,
    installment: installment_models.InstallmentUpdate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Partially update an installment plan, e.g. after a payment.
    """
    try:
        return crud_installment.update_db_installment(store, installment_id, installment, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{installment_id}", response_model=SuccessResponse,
               dependencies=[Depends(require_installment_updates)])
def delete_installment(
    installment_id: int,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Delete an installment plan. Succeeds whether or not it existed.
    """
    crud_installment.delete_db_installment(store, installment_id, user_id=user_id)
    return SuccessResponse()
