import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


FILE_BACKEND = "file"
SQL_BACKEND = "sql"

DEFAULT_FILE_BACKED_RESOURCES = ("transactions", "budgets", "cards", "installments", "tasks")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass
class Settings:
    """Runtime configuration, read from the environment."""

    database_url: str = "sqlite:///life_ledger.db"
    sql_echo: bool = False
    json_db_path: Path = Path("data/db.json")
    file_backed_resources: Tuple[str, ...] = DEFAULT_FILE_BACKED_RESOURCES
    auth_jwt_secret: str = "change-me"
    auth_jwt_audience: str = "authenticated"
    require_auth_for_file_resources: bool = False
    allow_card_updates: bool = False
    allow_installment_updates: bool = True
    default_budget_limit: float = 500.0
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("http://localhost:3000",))

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            sql_echo=_env_bool("SQL_ECHO", False),
            json_db_path=Path(os.getenv("JSON_DB_PATH", str(cls.json_db_path))),
            file_backed_resources=_env_list("FILE_BACKED_RESOURCES", DEFAULT_FILE_BACKED_RESOURCES),
            auth_jwt_secret=os.getenv("AUTH_JWT_SECRET", cls.auth_jwt_secret),
            auth_jwt_audience=os.getenv("AUTH_JWT_AUDIENCE", cls.auth_jwt_audience),
            require_auth_for_file_resources=_env_bool("REQUIRE_AUTH_FOR_FILE_RESOURCES", False),
            allow_card_updates=_env_bool("ALLOW_CARD_UPDATES", False),
            allow_installment_updates=_env_bool("ALLOW_INSTALLMENT_UPDATES", True),
            default_budget_limit=float(os.getenv("DEFAULT_BUDGET_LIMIT", "500")),
            cors_origins=_env_list("CORS_ORIGINS", ("http://localhost:3000",)),
        )

    def backend_for(self, resource: str) -> str:
        """Name of the storage backend that serves ``resource``."""
        if resource in self.file_backed_resources:
            return FILE_BACKEND
        return SQL_BACKEND

    def requires_auth(self, resource: str) -> bool:
        # File-backed data is local to the machine and skips auth unless asked to.
        if self.backend_for(resource) == SQL_BACKEND:
            return True
        return self.require_auth_for_file_resources


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
