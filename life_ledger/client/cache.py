"""
Client-side query cache.

Collections are cached under a logical key ("tasks", "budgets", ...). A key
can be fresh, stale (next fetch re-reads) or in flight (concurrent fetches
share the single pending call). Mutations either invalidate after success
(``mutate``) or apply their effect locally first and roll back on failure
(``mutate_optimistic``).
"""
import copy
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TypeVar

from life_ledger.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class _Entry:
    data: Any = None
    has_data: bool = False
    stale: bool = True
    # Bumped by cancel/invalidate; a fetch only writes back if it still matches
    generation: int = 0
    in_flight: Optional[Future] = None


class QueryCache:
    def __init__(self):
        self._lock = threading.RLock()
        self._entries: Dict[str, _Entry] = {}

    def _entry(self, key: str) -> _Entry:
        if key not in self._entries:
            self._entries[key] = _Entry()
        return self._entries[key]

    def _matching(self, key: str) -> List[_Entry]:
        # "tasks" also covers derived keys such as "tasks:overview"
        return [entry for name, entry in self._entries.items() if name == key or name.startswith(f"{key}:")]

    # ===== READS =====

    def fetch(self, key: str, fn: Callable[[], T]) -> T:
        """Return the cached value when fresh; otherwise call ``fn`` once, shared by concurrent callers."""
        with self._lock:
            entry = self._entry(key)
            if entry.has_data and not entry.stale:
                return entry.data
            if entry.in_flight is not None:
                pending = entry.in_flight
                owner = False
            else:
                pending = Future()
                entry.in_flight = pending
                generation = entry.generation
                owner = True

        if not owner:
            return pending.result()

        try:
            data = fn()
        except BaseException as e:
            with self._lock:
                if entry.in_flight is pending:
                    entry.in_flight = None
            pending.set_exception(e)
            raise

        with self._lock:
            if entry.generation == generation:
                entry.data = data
                entry.has_data = True
                entry.stale = False
            else:
                logger.debug(f"Dropping result for '{key}': fetch was cancelled")
            if entry.in_flight is pending:
                entry.in_flight = None
        pending.set_result(data)
        return data

    def get_data(self, key: str) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            return entry.data if entry is not None and entry.has_data else None

    def is_stale(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is None or entry.stale

    # ===== WRITES =====

    def set_data(self, key: str, value: Any) -> Any:
        """Replace the cached value; a callable receives the current value and returns the new one."""
        with self._lock:
            entry = self._entry(key)
            if callable(value):
                value = value(entry.data if entry.has_data else None)
            entry.data = value
            entry.has_data = True
            entry.stale = False
            return value

    def invalidate(self, key: str) -> None:
        """Mark ``key`` (and keys derived from it) stale so the next fetch re-reads."""
        with self._lock:
            for entry in self._matching(key):
                entry.stale = True
                entry.generation += 1
                entry.in_flight = None

    def cancel(self, key: str) -> None:
        """Results of fetches already in flight for ``key`` will not be written."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.in_flight is not None:
                entry.generation += 1
                entry.in_flight = None

    def _restore(self, key: str, snapshot: Any, had_data: bool) -> None:
        with self._lock:
            entry = self._entry(key)
            entry.data = snapshot
            entry.has_data = had_data

    # ===== MUTATIONS =====

    def mutate(self, key: str, fn: Callable[[], T]) -> T:
        """Send the mutation, then invalidate ``key``. Failures leave the cache untouched."""
        result = fn()
        self.invalidate(key)
        return result

    def mutate_optimistic(self, key: str, fn: Callable[[], T], apply: Callable[[Any], Any]) -> T:
        """
        Apply ``apply`` to the cached value immediately, then send the mutation.

        On failure the cached value is restored to the exact pre-mutation
        snapshot and the error is re-raised. Either way the key is invalidated
        afterwards so the next read reconciles with the server.
        """
        self.cancel(key)
        with self._lock:
            entry = self._entry(key)
            had_data = entry.has_data
            snapshot = copy.deepcopy(entry.data)
            if had_data:
                self.set_data(key, apply(copy.deepcopy(snapshot)))

        try:
            return fn()
        except Exception:
            logger.info(f"Optimistic update of '{key}' failed; rolling back")
            self._restore(key, snapshot, had_data)
            raise
        finally:
            self.invalidate(key)
