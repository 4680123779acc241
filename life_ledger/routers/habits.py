from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from datetime import date

from life_ledger.crud import crud_habit
from life_ledger.db.core import NotFoundError
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import habit as habit_models
from life_ledger.models.common import SuccessResponse

router = APIRouter(
    prefix="/habits",
    tags=["habits"],
)

RESOURCE = crud_habit.RESOURCE
LOG_RESOURCE = crud_habit.LOG_RESOURCE


@router.get("", response_model=List[habit_models.HabitResponse])
def read_habits(
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Retrieve the current user's habits, excluding archived ones.
    """
    return crud_habit.read_db_habits(store, user_id=user_id)


@router.post("", response_model=habit_models.HabitResponse)
def create_habit(
    habit: habit_models.HabitCreate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Create a habit. The start date defaults to today.
    """
    return crud_habit.create_db_habit(store, habit, user_id=user_id)


@router.post("/log", response_model=habit_models.HabitLogResponse)
def log_habit(
    log: habit_models.HabitLogCreate,
    habit_store: Store = Depends(store_for(RESOURCE)),
    log_store: Store = Depends(store_for(LOG_RESOURCE)),
    user_id: Optional[str] = Depends(user_for(LOG_RESOURCE)),
):
    """
    Record a habit's progress for a day, replacing any earlier entry for that day.
    """
    try:
        return crud_habit.log_db_habit(habit_store, log_store, log, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/stats", response_model=habit_models.HabitStatsResponse)
def read_habit_stats(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    habit_store: Store = Depends(store_for(RESOURCE)),
    log_store: Store = Depends(store_for(LOG_RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Daily completion stats between startDate and endDate (inclusive).
    """
    if start_date is None or end_date is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing startDate or endDate")
    try:
        return crud_habit.read_db_habit_stats(habit_store, log_store, start_date, end_date, user_id=user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put("/{habit_id}", response_model=habit_models.HabitResponse)
def update_habit(
    habit_id: int,
    habit: habit_models.HabitUpdate,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Update a habit's details.
    """
    try:
        return crud_habit.update_db_habit(store, habit_id, habit, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{habit_id}", response_model=SuccessResponse)
def archive_habit(
    habit_id: int,
    store: Store = Depends(store_for(RESOURCE)),
    user_id: Optional[str] = Depends(user_for(RESOURCE)),
):
    """
    Archive a habit. Its logs are kept and it no longer shows up in the list.
    """
    crud_habit.archive_db_habit(store, habit_id, user_id=user_id)
    return SuccessResponse()
