from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence


Record = Dict[str, Any]

# Natural keys for resources that are not addressed by ``id``
KEY_FIELDS = {
    "budgets": "category",
}


def key_field_for(resource: str) -> str:
    return KEY_FIELDS.get(resource, "id")


class Store(ABC):
    """
    Storage interface shared by the JSON file and relational backends.

    Records travel in the client naming convention (camelCase keys, JSON
    compatible values). When ``user_id`` is given every read and write is
    constrained to rows owned by that user; ``None`` means unscoped.
    """

    @abstractmethod
    def list(self, resource: str, user_id: Optional[str] = None) -> List[Record]:
        ...

    @abstractmethod
    def list_between(self, resource: str, field: str, start: Any, end: Any,
                     user_id: Optional[str] = None) -> List[Record]:
        """Records whose ``field`` (a date) lies in [start, end]."""
        ...

    @abstractmethod
    def get(self, resource: str, key: Any, user_id: Optional[str] = None,
            key_field: Optional[str] = None) -> Optional[Record]:
        ...

    @abstractmethod
    def insert(self, resource: str, record: Record, user_id: Optional[str] = None) -> Record:
        ...

    @abstractmethod
    def update(self, resource: str, key: Any, changes: Record, user_id: Optional[str] = None,
               key_field: Optional[str] = None) -> Optional[Record]:
        """Shallow-merge ``changes`` into the stored record; ``None`` when absent."""
        ...

    @abstractmethod
    def delete(self, resource: str, key: Any, user_id: Optional[str] = None,
               key_field: Optional[str] = None) -> bool:
        """Remove the record; returns whether a row matched."""
        ...

    @abstractmethod
    def upsert(self, resource: str, record: Record, conflict_fields: Sequence[str],
               user_id: Optional[str] = None) -> Record:
        """Overwrite the record matching ``conflict_fields`` or insert a new one."""
        ...
