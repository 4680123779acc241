from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from life_ledger.config import Settings, get_settings
from life_ledger.crud import crud_card
from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import card as card_models
from life_ledger.models.common import SuccessResponse

router = APIRouter(
    prefix="/cards",
    tags=["cards"],
)

RESOURCE = crud_card.RESOURCE


@router.get("", response_model=List[card_models.CardResponse])
def read_cards(
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Retrieve all cards.
    """
    return crud_card.read_db_cards(store, user_id=user_id)


@router.post("", response_model=card_models.CardResponse)
def create_card(
    card: card_models.CardCreate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Add a card. Only the last 4 characters of the number are stored.
    """
    return crud_card.create_db_card(store, card, user_id=user_id)


@router.put("/{card_id}", response_model=card_models.CardResponse)
def update_card(
    card_id: int,
    card: card_models.CardUpdate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
    settings: Settings = Depends(get_settings),
):
    """
    Partially update a card (freeze, balance, color...). Disabled unless ALLOW_CARD_UPDATES is set.
    """
    if not settings.allow_card_updates:
        raise HTTPException(status_code=status.HTTP_405_METHOD_NOT_ALLOWED, detail="Card updates are disabled")
    try:
        return crud_card.update_db_card(store, card_id, card, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{card_id}", response_model=SuccessResponse)
def delete_card(
    card_id: int,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Delete a card. Succeeds whether or not it existed.
    """
    crud_card.delete_db_card(store, card_id, user_id=user_id)
    return SuccessResponse()
