# routers/tasks.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from db.database import get_db

from models.user import User
from schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskInstanceResponse,
    TaskEntry,
    TaskCompletionResponse,
)
from auth.deps import get_current_user
from services import task_service
from services.recurrence import TaskInstance

from datetime import date
from uuid import UUID
from typing import List, Optional

router = APIRouter(prefix="/tasks", tags=["Tasks"])


# -------------------------
# utility
# -------------------------
def to_entry_response(entry) -> TaskEntry:
    """Persisted rows and derived occurrences are serialized as different shapes"""
    if isinstance(entry, TaskInstance):
        return TaskInstanceResponse.model_validate(entry)
    return TaskResponse.model_validate(entry)


# -------------------------
# endpoints
# -------------------------
@router.get("/", response_model=List[TaskEntry])
def get_tasks(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    completed: Optional[bool] = Query(None),
    include_recurring: bool = Query(False),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    entries = task_service.list_tasks(
        db,
        user.user_id,
        start_date=start_date,
        end_date=end_date,
        completed=completed,
        include_recurring=include_recurring,
    )
    return [to_entry_response(e) for e in entries]


@router.get("/upcoming", response_model=List[TaskEntry])
def get_upcoming_tasks(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [to_entry_response(e) for e in task_service.upcoming_tasks(db, user.user_id)]


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return task_service.create_task(db, user.user_id, task)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return task_service.get_task(db, user.user_id, task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: UUID,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return task_service.update_task(db, user.user_id, task_id, task_update)


@router.patch("/{task_id}/complete", response_model=TaskCompletionResponse)
def complete_task(task_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    task, next_task = task_service.complete_task(db, user.user_id, task_id)
    return TaskCompletionResponse(
        task=TaskResponse.model_validate(task),
        next_task=TaskResponse.model_validate(next_task) if next_task is not None else None,
    )


@router.delete("/{task_id}")
def delete_task(task_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    task_service.delete_task(db, user.user_id, task_id)
    return {"message": "Task deleted successfully"}
