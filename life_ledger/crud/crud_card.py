from typing import List, Optional

from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store, Record
from life_ledger.logging_config import get_logger
from life_ledger.models.card import CardCreate, CardUpdate

logger = get_logger(__name__)

RESOURCE = "cards"


def create_db_card(store: Store, card_data: CardCreate, user_id: Optional[str] = None) -> Record:
    """Create a new card; only the last 4 characters of the number are kept"""
    record = store.insert(RESOURCE, card_data.to_wire(), user_id=user_id)
    logger.info(f"Created {record['type']} card {record['id']} ending in {record['number']}")
    return record


def read_db_cards(store: Store, user_id: Optional[str] = None) -> List[Record]:
    """Read all cards"""
    return store.list(RESOURCE, user_id=user_id)


def update_db_card(store: Store, card_id: int, card_updates: CardUpdate, user_id: Optional[str] = None) -> Record:
    """Shallow-merge the provided fields into a card"""
    updated = store.update(RESOURCE, card_id, card_updates.to_wire(exclude_unset=True), user_id=user_id)
    if updated is None:
        raise NotFoundError(f"Card with id {card_id} not found")
    return updated


def delete_db_card(store: Store, card_id: int, user_id: Optional[str] = None) -> bool:
    """Delete a card"""
    return store.delete(RESOURCE, card_id, user_id=user_id)
