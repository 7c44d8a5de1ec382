# schemas/task.py
from pydantic import BaseModel
from datetime import date, datetime
from typing import Literal, Optional, Union
from uuid import UUID
from enum import Enum
from schemas.plant import PlantSummary


class TaskKind(str, Enum):
    WATERING = "watering"
    FERTILIZING = "fertilizing"
    PRUNING = "pruning"
    OTHER = "other"


class RecurrencePattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class TaskBase(BaseModel):
    plant_id: UUID
    kind: TaskKind
    due_date: date
    notes: Optional[str] = None
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_interval: Optional[int] = None


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    plant_id: Optional[UUID] = None
    kind: Optional[TaskKind] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_interval: Optional[int] = None


class TaskResponse(TaskBase):
    """A persisted task"""
    task_id: UUID
    user_id: UUID
    completed: bool
    completed_date: Optional[date] = None
    next_recurrence: Optional[date] = None
    created_at: datetime
    updated_at: datetime
    is_synthetic: Literal[False] = False
    plant: Optional[PlantSummary] = None

    class Config:
        from_attributes = True


class TaskInstanceResponse(TaskBase):
    """
    A future occurrence of a recurring task, derived on read.
    template_id points back at the persisted task it was expanded from.
    """
    instance_id: str
    template_id: UUID
    user_id: UUID
    completed: Literal[False] = False
    completed_date: None = None
    is_synthetic: Literal[True] = True
    plant: Optional[PlantSummary] = None

    class Config:
        from_attributes = True


TaskEntry = Union[TaskResponse, TaskInstanceResponse]


class TaskCompletionResponse(BaseModel):
    task: TaskResponse
    next_task: Optional[TaskResponse] = None
