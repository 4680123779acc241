from typing import List, Optional

from life_ledger.db.store import Store, Record
from life_ledger.logging_config import get_logger
from life_ledger.models.transaction import TransactionCreate

logger = get_logger(__name__)

RESOURCE = "transactions"


def create_db_transaction(store: Store, transaction_data: TransactionCreate, user_id: Optional[str] = None) -> Record:
    """Create a new transaction; the store assigns the id"""
    record = store.insert(RESOURCE, transaction_data.to_wire(), user_id=user_id)
    logger.info(f"Created {record['type']} transaction {record['id']} in '{record['category']}'")
    return record


def read_db_transactions(store: Store, user_id: Optional[str] = None) -> List[Record]:
    """Read all transactions, newest first"""
    records = store.list(RESOURCE, user_id=user_id)
    return sorted(records, key=lambda r: (r.get("date") or "", r.get("id") or 0), reverse=True)


def delete_db_transaction(store: Store, transaction_id: int, user_id: Optional[str] = None) -> bool:
    """Delete a transaction; returns whether one was removed"""
    deleted = store.delete(RESOURCE, transaction_id, user_id=user_id)
    if not deleted:
        logger.debug(f"Transaction {transaction_id} not found for delete")
    return deleted
