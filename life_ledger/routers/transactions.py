from fastapi import APIRouter, Depends
from typing import List, Optional

from life_ledger.crud import crud_transaction
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import transaction as transaction_models
from life_ledger.models.common import SuccessResponse

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
)

RESOURCE = crud_transaction.RESOURCE


@router.get("", response_model=List[transaction_models.TransactionResponse])
def read_transactions(
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Retrieve all transactions, newest first.
    """
    return crud_transaction.read_db_transactions(store, user_id=user_id)


@router.post("", response_model=transaction_models.TransactionResponse)
def create_transaction(
    transaction: transaction_models.TransactionCreate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Record a new income or expense.
    """
    return crud_transaction.create_db_transaction(store, transaction, user_id=user_id)


@router.delete("/{transaction_id}", response_model=SuccessResponse)
def delete_transaction(
    transaction_id: int,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Delete a transaction. Succeeds whether or not it existed.
    """
    crud_transaction.delete_db_transaction(store, transaction_id, user_id=user_id)
    return SuccessResponse()
