# task_schema.py
import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.models import TaskPriority, TaskStatus
from schemas.common import PageMeta, blank_to_none


# ============================================================
# ✅ Task Create / Update (input)
# ============================================================
class TaskCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    project_id: Optional[uuid.UUID] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(default=None, allow_inf_nan=False)
    actual_hours: Optional[float] = Field(default=None, allow_inf_nan=False)
    # position is assigned server-side

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("description", "project_id", "due_date", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return blank_to_none(v)


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    project_id: Optional[uuid.UUID] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(default=None, allow_inf_nan=False)
    actual_hours: Optional[float] = Field(default=None, allow_inf_nan=False)
    position: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("description", "project_id", "due_date", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return blank_to_none(v)


# ============================================================
# ✅ Task Read (output)
# ============================================================
class TaskRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    project_id: Optional[uuid.UUID] = None
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    position: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskPage(PageMeta):
    tasks: List[TaskRead]


class TaskStats(BaseModel):
    todo: int = 0
    in_progress: int = 0
    review: int = 0
    done: int = 0
    total: int = 0
