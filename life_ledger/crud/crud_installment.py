from typing import List, Optional

from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store, Record
from life_ledger.logging_config import get_logger
from life_ledger.models.installment import InstallmentCreate, InstallmentUpdate

logger = get_logger(__name__)

RESOURCE = "installments"


def create_db_installment(store: Store, installment_data: InstallmentCreate, user_id: Optional[str] = None) -> Record:
    """Create a new installment plan"""
    record = store.insert(RESOURCE, installment_data.to_wire(), user_id=user_id)
    logger.info(f"Created installment plan {record['id']} ({record['totalMonths']} months)")
    return record


def read_db_installments(store: Store, user_id: Optional[str] = None) -> List[Record]:
    """Read all installment plans, most recently started first"""
    return sorted(store.list(RESOURCE, user_id=user_id), key=lambda r: r.get("startDate") or "", reverse=True)


def update_db_installment(store: Store, installment_id: int, installment_updates: InstallmentUpdate,
                          user_id: Optional[str] = None) -> Record:
    """Shallow-merge the provided fields into an installment plan"""
    changes = installment_updates.to_wire(exclude_unset=True)
    existing = store.get(RESOURCE, installment_id, user_id=user_id)
    if existing is None:
        raise NotFoundError(f"Installment with id {installment_id} not found")

    paid_months = changes.get("paidMonths", existing.get("paidMonths", 0))
    total_months = changes.get("totalMonths", existing.get("totalMonths", 0))
    if paid_months > total_months:
        raise ValueError("paidMonths cannot exceed totalMonths")

    return store.update(RESOURCE, installment_id, changes, user_id=user_id)


def delete_db_installment(store: Store, installment_id: int, user_id: Optional[str] = None) -> bool:
    """Delete an installment plan"""
    return store.delete(RESOURCE, installment_id, user_id=user_id)
