# services/recurrence.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, List, Optional, Tuple
from uuid import UUID

from dateutil.relativedelta import relativedelta

from models.task import Task
from schemas.task import RecurrencePattern
from services.exceptions import InvalidRecurrenceConfig


# -------------------------
# data
# -------------------------
@dataclass(frozen=True)
class TaskInstance:
    """
    One future occurrence of a recurring task. Exists only inside a single
    query response and is never written to the database.
    """
    template_id: UUID
    user_id: UUID
    plant_id: UUID
    kind: str
    due_date: date
    notes: Optional[str]
    recurrence_pattern: str
    recurrence_interval: int
    plant: Any = None
    is_recurring: bool = True
    completed: bool = False
    completed_date: None = None
    is_synthetic: bool = True

    @property
    def instance_id(self) -> str:
        """{template_id}_{epoch millis of the due date at UTC midnight}"""
        midnight = datetime.combine(self.due_date, time.min, tzinfo=timezone.utc)
        return f"{self.template_id}_{int(midnight.timestamp()) * 1000}"


# -------------------------
# stepping
# -------------------------
def step_once(current: date, pattern: str, interval: int) -> date:
    """
    Move `current` forward by one recurrence step.
    Monthly/yearly steps keep the day of month, clamped to the target month's last day.
    """
    if interval is None or interval < 1:
        raise InvalidRecurrenceConfig(f"recurrence_interval must be >= 1, got {interval!r}")

    pattern = RecurrencePattern(pattern)
    if pattern is RecurrencePattern.DAILY:
        return current + relativedelta(days=interval)
    if pattern is RecurrencePattern.WEEKLY:
        return current + relativedelta(weeks=interval)
    if pattern is RecurrencePattern.MONTHLY:
        return current + relativedelta(months=interval)
    return current + relativedelta(years=interval)


def validate_recurrence(is_recurring: bool, pattern: Optional[str], interval: Optional[int]) -> None:
    if not is_recurring:
        return
    if pattern is None or interval is None:
        raise InvalidRecurrenceConfig(
            "recurrence_pattern and recurrence_interval are required for recurring tasks"
        )
    try:
        RecurrencePattern(pattern)
    except ValueError:
        raise InvalidRecurrenceConfig(f"unknown recurrence_pattern {pattern!r}") from None
    if interval < 1:
        raise InvalidRecurrenceConfig(f"recurrence_interval must be >= 1, got {interval}")


def restore_recurrence_invariants(task: Task, due_date_changed: bool = False) -> Task:
    """
    Bring the recurrence fields of a task back in line before it is written.

    - non-recurring tasks carry no pattern, interval or next_recurrence
    - an open recurring task caches its own due date as next_recurrence
      whenever the cache is empty or the due date was edited
    """
    if not task.is_recurring:
        task.recurrence_pattern = None
        task.recurrence_interval = None
        task.next_recurrence = None
        return task

    if not task.completed and (task.next_recurrence is None or due_date_changed):
        task.next_recurrence = task.due_date
    return task


# -------------------------
# expander
# -------------------------
def _is_expandable(template: Task) -> bool:
    return bool(
        template.is_recurring
        and template.recurrence_pattern
        and template.recurrence_interval is not None
        and not template.completed
    )


def expand(template: Task, window_end: date) -> List[TaskInstance]:
    """
    Occurrences of `template` after its own due date, up to and including
    window_end. Completed or non-recurring templates yield nothing.
    """
    if not _is_expandable(template):
        return []

    pattern = template.recurrence_pattern
    interval = template.recurrence_interval

    # step_once rejects interval < 1 on the first pass, so the loop always terminates
    instances: List[TaskInstance] = []
    cursor = template.due_date
    while True:
        cursor = step_once(cursor, pattern, interval)
        if cursor > window_end:
            break
        instances.append(
            TaskInstance(
                template_id=template.task_id,
                user_id=template.user_id,
                plant_id=template.plant_id,
                kind=template.kind,
                due_date=cursor,
                notes=template.notes,
                recurrence_pattern=pattern,
                recurrence_interval=interval,
                plant=template.plant,
            )
        )
    return instances


# -------------------------
# advancer
# -------------------------
def advance(template: Task, completed_on: date) -> Tuple[Task, Optional[Task]]:
    """
    Mark `template` completed and, for a recurring task, build its successor.

    The next due date is stepped from the stored due_date, not from the
    completion date, so late completions do not shift the schedule.
    Returns (template, successor); successor is None for non-recurring tasks
    and for tasks that were already completed.
    """
    if template.completed:
        return template, None

    template.completed = True
    template.completed_date = completed_on

    if not template.is_recurring:
        return template, None

    next_due = step_once(template.due_date, template.recurrence_pattern, template.recurrence_interval)
    template.next_recurrence = next_due

    successor = Task(
        user_id=template.user_id,
        plant_id=template.plant_id,
        kind=template.kind,
        due_date=next_due,
        notes=template.notes,
        completed=False,
        is_recurring=True,
        recurrence_pattern=template.recurrence_pattern,
        recurrence_interval=template.recurrence_interval,
    )
    return template, successor
