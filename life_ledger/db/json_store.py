import json
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from life_ledger.db.core import StorageError
from life_ledger.db.store import Store, Record, key_field_for
from life_ledger.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_COLLECTIONS = ("transactions", "budgets", "cards", "installments", "tasks")

# One lock per file so concurrent requests in this process do not interleave
# their read-modify-write cycles. Writers in other processes are not detected.
_file_locks: Dict[str, threading.Lock] = {}
_file_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _file_locks_guard:
        if key not in _file_locks:
            _file_locks[key] = threading.Lock()
        return _file_locks[key]


class JsonFileStore(Store):
    """
    Flat JSON document with one top-level array per resource.

    Records are stored exactly as they travel on the wire. Server ids are
    millisecond timestamps, bumped past the current maximum when two records
    are created within the same millisecond.
    """

    def __init__(self, path: Path, collections: Sequence[str] = DEFAULT_COLLECTIONS):
        self.path = Path(path)
        self.collections = tuple(collections)
        self._lock = _lock_for(self.path)

    # ===== FILE ACCESS =====

    def read_db(self) -> Dict[str, List[Record]]:
        if not self.path.exists():
            return {name: [] for name in self.collections}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read {self.path}: {e}")
            raise StorageError(f"Failed to read data file: {e}") from e
        if not isinstance(data, dict):
            logger.error(f"Unexpected top-level {type(data).__name__} in {self.path}")
            raise StorageError("Failed to read data file: expected a JSON object")
        for name in self.collections:
            data.setdefault(name, [])
        return data

    def write_db(self, data: Dict[str, List[Record]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            # Write to a sibling temp file and swap it in so readers never see a partial file
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".db-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                # The data file is untouched; only the partial temp file goes
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            raise StorageError(f"Failed to write data file: {e}") from e

    # ===== HELPERS =====

    @staticmethod
    def _owned(record: Record, user_id: Optional[str]) -> bool:
        return user_id is None or record.get("userId") == user_id

    @staticmethod
    def _next_id(records: List[Record]) -> int:
        now = int(time.time() * 1000)
        highest = max((r["id"] for r in records if isinstance(r.get("id"), int)), default=0)
        return max(now, highest + 1)

    def _find(self, records: List[Record], field: str, key: Any, user_id: Optional[str]) -> int:
        for index, record in enumerate(records):
            if record.get(field) == key and self._owned(record, user_id):
                return index
        return -1

    # ===== STORE INTERFACE =====

    def list(self, resource: str, user_id: Optional[str] = None) -> List[Record]:
        data = self.read_db()
        return [dict(r) for r in data.get(resource, []) if self._owned(r, user_id)]

    def list_between(self, resource: str, field: str, start: Any, end: Any,
                     user_id: Optional[str] = None) -> List[Record]:
        # ISO dates compare correctly as strings
        start, end = str(start), str(end)
        return [r for r in self.list(resource, user_id=user_id) if start <= str(r.get(field) or "") <= end]

    def get(self, resource: str, key: Any, user_id: Optional[str] = None,
            key_field: Optional[str] = None) -> Optional[Record]:
        field = key_field or key_field_for(resource)
        records = self.read_db().get(resource, [])
        index = self._find(records, field, key, user_id)
        return dict(records[index]) if index >= 0 else None

    def insert(self, resource: str, record: Record, user_id: Optional[str] = None) -> Record:
        with self._lock:
            data = self.read_db()
            records = data.setdefault(resource, [])
            new_record = dict(record)
            if key_field_for(resource) == "id":
                new_record["id"] = self._next_id(records)
            if user_id is not None:
                new_record["userId"] = user_id
            records.append(new_record)
            self.write_db(data)
        logger.debug(f"Inserted {resource} record {new_record.get('id', '')}")
        return dict(new_record)

    def update(self, resource: str, key: Any, changes: Record, user_id: Optional[str] = None,
               key_field: Optional[str] = None) -> Optional[Record]:
        field = key_field or key_field_for(resource)
        with self._lock:
            data = self.read_db()
            records = data.setdefault(resource, [])
            index = self._find(records, field, key, user_id)
            if index < 0:
                return None
            merged = {**records[index], **changes}
            # The key and the owner never change through an update
            merged[field] = records[index][field]
            if "userId" in records[index]:
                merged["userId"] = records[index]["userId"]
            records[index] = merged
            self.write_db(data)
        return dict(merged)

    def delete(self, resource: str, key: Any, user_id: Optional[str] = None,
               key_field: Optional[str] = None) -> bool:
        field = key_field or key_field_for(resource)
        with self._lock:
            data = self.read_db()
            records = data.setdefault(resource, [])
            remaining = [r for r in records if not (r.get(field) == key and self._owned(r, user_id))]
            if len(remaining) == len(records):
                return False
            data[resource] = remaining
            self.write_db(data)
        return True

    def upsert(self, resource: str, record: Record, conflict_fields: Sequence[str],
               user_id: Optional[str] = None) -> Record:
        with self._lock:
            data = self.read_db()
            records = data.setdefault(resource, [])
            for index, existing in enumerate(records):
                if self._owned(existing, user_id) and all(existing.get(f) == record.get(f) for f in conflict_fields):
                    merged = {**existing, **record}
                    if "id" in existing:
                        merged["id"] = existing["id"]
                    records[index] = merged
                    self.write_db(data)
                    return dict(merged)
            new_record = dict(record)
            if key_field_for(resource) == "id":
                new_record["id"] = self._next_id(records)
            if user_id is not None:
                new_record["userId"] = user_id
            records.append(new_record)
            self.write_db(data)
        return dict(new_record)
