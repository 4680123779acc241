from typing import Optional

from sqlalchemy.orm import Session

from life_ledger.config import Settings, FILE_BACKEND
from life_ledger.db.json_store import JsonFileStore
from life_ledger.db.sql_store import SqlStore
from life_ledger.db.store import Store


class StoreRegistry:
    """Resolves the backend serving each resource, per the settings."""

    def __init__(self, settings: Settings, db: Optional[Session] = None):
        self.settings = settings
        self.db = db
        self._json_store: Optional[JsonFileStore] = None
        self._sql_store: Optional[SqlStore] = None

    def for_resource(self, resource: str) -> Store:
        if self.settings.backend_for(resource) == FILE_BACKEND:
            return self.json_store
        return self.sql_store

    @property
    def json_store(self) -> JsonFileStore:
        if self._json_store is None:
            self._json_store = JsonFileStore(self.settings.json_db_path)
        return self._json_store

    @property
    def sql_store(self) -> SqlStore:
        if self._sql_store is None:
            if self.db is None:
                raise RuntimeError("A database session is required for relational resources")
            self._sql_store = SqlStore(self.db)
        return self._sql_store
