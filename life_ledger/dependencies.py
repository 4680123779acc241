from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from life_ledger.auth import user_id_from_request
from life_ledger.config import Settings, get_settings
from life_ledger.db.core import get_db
from life_ledger.db.registry import StoreRegistry
from life_ledger.db.store import Store


def get_stores(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> StoreRegistry:
    return StoreRegistry(settings, db)


def store_for(resource: str):
    """Dependency resolving the store that serves ``resource``."""
    def dependency(stores: StoreRegistry = Depends(get_stores)) -> Store:
        return stores.for_resource(resource)
    return dependency


def user_for(resource: str):
    """
    Dependency resolving the session user for ``resource``.

    Relational resources always require a session. File-backed resources only
    do when ``REQUIRE_AUTH_FOR_FILE_RESOURCES`` is set; otherwise they are
    served unscoped and this yields ``None``.
    """
    def dependency(request: Request, settings: Settings = Depends(get_settings)) -> Optional[str]:
        if not settings.requires_auth(resource):
            return None
        return user_id_from_request(request, settings)
    return dependency
