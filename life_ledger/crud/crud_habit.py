from datetime import date, datetime
from typing import List, Optional

from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store, Record
from life_ledger.logging_config import get_logger
from life_ledger.models.habit import (
    HabitCreate, HabitUpdate, HabitResponse, HabitLogCreate, HabitLogResponse, HabitStatsResponse,
)
from life_ledger.services.analytics import habit_daily_stats, habit_logs_map

logger = get_logger(__name__)

RESOURCE = "habits"
LOG_RESOURCE = "habit_logs"

# Logs are unique per habit and day
LOG_CONFLICT_FIELDS = ("habitId", "date")


# ===== HABITS =====

def create_db_habit(store: Store, habit_data: HabitCreate, user_id: Optional[str] = None) -> Record:
    """Create a new habit"""
    record = habit_data.to_wire()
    record["archivedAt"] = None
    created = store.insert(RESOURCE, record, user_id=user_id)
    logger.info(f"Created habit {created['id']} '{created['title']}'")
    return created


def read_db_habits(store: Store, user_id: Optional[str] = None) -> List[Record]:
    """Read the user's habits that are not archived, newest first"""
    habits = [h for h in store.list(RESOURCE, user_id=user_id) if not h.get("archivedAt")]
    return sorted(habits, key=lambda h: h.get("id") or 0, reverse=True)


def update_db_habit(store: Store, habit_id: int, habit_updates: HabitUpdate, user_id: Optional[str] = None) -> Record:
    """Update a habit's details"""
    updated = store.update(RESOURCE, habit_id, habit_updates.to_wire(exclude_unset=True), user_id=user_id)
    if updated is None:
        raise NotFoundError(f"Habit with id {habit_id} not found")
    return updated


def archive_db_habit(store: Store, habit_id: int, user_id: Optional[str] = None) -> bool:
    """
    Soft-delete a habit by stamping ``archivedAt``.

    Archiving is one-way; a habit that is already archived keeps its original
    timestamp. Returns whether a habit was archived by this call.
    """
    habit = store.get(RESOURCE, habit_id, user_id=user_id)
    if habit is None or habit.get("archivedAt"):
        return False
    store.update(RESOURCE, habit_id, {"archivedAt": datetime.utcnow().isoformat()}, user_id=user_id)
    logger.info(f"Archived habit {habit_id}")
    return True


# ===== LOGS =====

def log_db_habit(habit_store: Store, log_store: Store, log_data: HabitLogCreate,
                 user_id: Optional[str] = None) -> Record:
    """Record progress for a habit on a day, overwriting any earlier value for that day"""
    if habit_store.get(RESOURCE, log_data.habit_id, user_id=user_id) is None:
        raise NotFoundError(f"Habit with id {log_data.habit_id} not found")

    record = log_store.upsert(LOG_RESOURCE, log_data.to_wire(), LOG_CONFLICT_FIELDS, user_id=user_id)
    logger.debug(f"Logged {log_data.completed_value} for habit {log_data.habit_id} on {log_data.date}")
    return record


def read_db_habit_stats(habit_store: Store, log_store: Store, start: date, end: date,
                        user_id: Optional[str] = None) -> HabitStatsResponse:
    """Daily completion stats, the raw logs and the habits relevant to [start, end]"""
    if start > end:
        raise ValueError("startDate must not be after endDate")

    # Relevant habits started before the period ends and were not archived before it began
    habits = []
    for record in habit_store.list(RESOURCE, user_id=user_id):
        habit = HabitResponse.model_validate(record)
        if (habit.active_from_date or habit.start_date) > end:
            continue
        if habit.archived_at is not None and habit.archived_at.date() <= start:
            continue
        habits.append(habit)

    logs = [
        HabitLogResponse.model_validate(record)
        for record in log_store.list_between(LOG_RESOURCE, "date", start, end, user_id=user_id)
    ]

    return HabitStatsResponse(
        daily_stats=habit_daily_stats(habits, logs, start, end),
        logs=habit_logs_map(logs),
        habits=habits,
    )
