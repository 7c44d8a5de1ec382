# services/task_service.py
import calendar
import logging
import uuid
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from models.task import Task
from schemas.task import TaskCreate, TaskUpdate
from services.exceptions import NotFound, TransientPersistenceFailure
from services.plant_service import get_owned_plant, record_care
from services.recurrence import (
    TaskInstance,
    advance,
    expand,
    restore_recurrence_invariants,
    validate_recurrence,
)

logger = logging.getLogger(__name__)

UPCOMING_HORIZON_DAYS = 30
UPCOMING_LIMIT = 10

TaskEntry = Union[Task, TaskInstance]


# -------------------------
# utility
# -------------------------
def month_window(today: date) -> Tuple[date, date]:
    """First and last day of the month containing `today`"""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


def _merge_sorted(tasks: List[Task], instances: List[TaskInstance]) -> List[TaskEntry]:
    # sorted() is stable: equal due dates keep persisted rows first, then template order
    return sorted([*tasks, *instances], key=lambda t: t.due_date)


def _expand_all(templates: List[Task], start: date, end: date) -> List[TaskInstance]:
    instances: List[TaskInstance] = []
    for template in templates:
        instances.extend(i for i in expand(template, end) if i.due_date >= start)
    return instances


def _open_recurring_templates(db: Session, user_id: uuid.UUID, end: date) -> List[Task]:
    return (
        db.query(Task)
        .options(joinedload(Task.plant))
        .filter(
            Task.user_id == user_id,
            Task.is_recurring.is_(True),
            Task.completed.is_(False),
            Task.due_date <= end,
        )
        .order_by(Task.due_date, Task.created_at)
        .all()
    )


# -------------------------
# queries
# -------------------------
def list_tasks(
    db: Session,
    user_id: uuid.UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    completed: Optional[bool] = None,
    include_recurring: bool = False,
    today: Optional[date] = None,
) -> List[TaskEntry]:
    """
    Persisted tasks with due dates in [start_date, end_date], optionally merged
    with occurrences of open recurring tasks that fall in the same window.
    Without an explicit window the current calendar month is used.
    """
    if start_date is None or end_date is None:
        start_date, end_date = month_window(today or date.today())

    query = (
        db.query(Task)
        .options(joinedload(Task.plant))
        .filter(
            Task.user_id == user_id,
            Task.due_date >= start_date,
            Task.due_date <= end_date,
        )
    )
    if completed is not None:
        query = query.filter(Task.completed.is_(completed))
    tasks = query.order_by(Task.due_date, Task.created_at).all()

    # derived occurrences are never completed
    if not include_recurring or completed is True:
        return tasks

    templates = _open_recurring_templates(db, user_id, end_date)
    return _merge_sorted(tasks, _expand_all(templates, start_date, end_date))


def upcoming_tasks(
    db: Session,
    user_id: uuid.UUID,
    today: Optional[date] = None,
    limit: int = UPCOMING_LIMIT,
    horizon_days: int = UPCOMING_HORIZON_DAYS,
) -> List[TaskEntry]:
    """Open tasks and recurring occurrences due within the next `horizon_days` days"""
    start = today or date.today()
    end = start + timedelta(days=horizon_days)

    tasks = (
        db.query(Task)
        .options(joinedload(Task.plant))
        .filter(
            Task.user_id == user_id,
            Task.completed.is_(False),
            Task.due_date >= start,
            Task.due_date <= end,
        )
        .order_by(Task.due_date, Task.created_at)
        .all()
    )
    templates = _open_recurring_templates(db, user_id, end)
    return _merge_sorted(tasks, _expand_all(templates, start, end))[:limit]


def get_task(db: Session, user_id: uuid.UUID, task_id: uuid.UUID) -> Task:
    task = db.query(Task).filter(
        Task.user_id == user_id,
        Task.task_id == task_id
    ).first()

    if not task:
        raise NotFound("Task not found")

    return task


# -------------------------
# writes
# -------------------------
def create_task(db: Session, user_id: uuid.UUID, data: TaskCreate) -> Task:
    get_owned_plant(db, user_id, data.plant_id)

    pattern = _enum_value(data.recurrence_pattern)
    validate_recurrence(data.is_recurring, pattern, data.recurrence_interval)

    task = Task(
        user_id=user_id,
        plant_id=data.plant_id,
        kind=_enum_value(data.kind),
        due_date=data.due_date,
        notes=data.notes,
        completed=False,
        is_recurring=data.is_recurring,
        recurrence_pattern=pattern,
        recurrence_interval=data.recurrence_interval,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow(),
    )
    restore_recurrence_invariants(task)

    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, user_id: uuid.UUID, task_id: uuid.UUID, data: TaskUpdate) -> Task:
    task = get_task(db, user_id, task_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("plant_id") is not None:
        get_owned_plant(db, user_id, changes["plant_id"])

    is_recurring = changes.get("is_recurring")
    if is_recurring is None:
        is_recurring = task.is_recurring
    pattern = _enum_value(changes.get("recurrence_pattern", task.recurrence_pattern))
    interval = changes.get("recurrence_interval", task.recurrence_interval)
    validate_recurrence(is_recurring, pattern, interval)

    due_date_changed = changes.get("due_date") is not None and changes["due_date"] != task.due_date

    # --- apply changes ---
    if changes.get("plant_id") is not None:
        task.plant_id = changes["plant_id"]
    if changes.get("kind") is not None:
        task.kind = _enum_value(changes["kind"])
    if changes.get("due_date") is not None:
        task.due_date = changes["due_date"]
    if "notes" in changes:
        task.notes = changes["notes"]
    task.is_recurring = is_recurring
    task.recurrence_pattern = pattern
    task.recurrence_interval = interval

    restore_recurrence_invariants(task, due_date_changed=due_date_changed)
    task.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(task)
    return task


def complete_task(
    db: Session,
    user_id: uuid.UUID,
    task_id: uuid.UUID,
    today: Optional[date] = None,
) -> Tuple[Task, Optional[Task]]:
    """
    Mark a task completed. For a recurring task the next task of the series is
    inserted after the original has been committed; if that insert fails the
    original stays completed and TransientPersistenceFailure is raised.
    """
    task = get_task(db, user_id, task_id)
    completed_on = today or date.today()

    was_open = not task.completed
    task, successor = advance(task, completed_on)

    if was_open and task.plant is not None:
        record_care(task.plant, task.kind, completed_on)

    task.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(task)

    if successor is None:
        if was_open:
            logger.info("Task %s completed", task.task_id)
        return task, None

    successor.created_at = datetime.utcnow()
    successor.updated_at = datetime.utcnow()
    restore_recurrence_invariants(successor)
    try:
        db.add(successor)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Task %s completed but its successor could not be saved: %s", task.task_id, e)
        raise TransientPersistenceFailure(
            f"Task {task.task_id} was completed but the next occurrence could not be created"
        ) from e

    db.refresh(successor)
    logger.info(
        "Task %s completed, next occurrence %s due %s",
        task.task_id, successor.task_id, successor.due_date,
    )
    return task, successor


def delete_task(db: Session, user_id: uuid.UUID, task_id: uuid.UUID) -> None:
    task = get_task(db, user_id, task_id)
    db.delete(task)
    db.commit()
