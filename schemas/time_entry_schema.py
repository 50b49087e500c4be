# schemas/time_entry_schema.py
import uuid
from datetime import date as date_type
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.common import PageMeta, blank_to_none


class TimeEntryCreate(BaseModel):
    task_id: Optional[uuid.UUID] = None
    project_id: Optional[uuid.UUID] = None
    description: Optional[str] = None
    hours: float = Field(..., allow_inf_nan=False)
    date: Optional[date_type] = None  # defaults to today
    billable: bool = True

    @field_validator("task_id", "project_id", "description", "date", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return blank_to_none(v)


class TimeEntryUpdate(BaseModel):
    task_id: Optional[uuid.UUID] = None
    project_id: Optional[uuid.UUID] = None
    description: Optional[str] = None
    hours: Optional[float] = Field(default=None, allow_inf_nan=False)
    date: Optional[date_type] = None
    billable: Optional[bool] = None

    @field_validator("task_id", "project_id", "description", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return blank_to_none(v)


class TimeEntryRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    task_id: Optional[uuid.UUID] = None
    project_id: Optional[uuid.UUID] = None
    description: Optional[str] = None
    hours: float
    date: date_type
    billable: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TimeEntryPage(PageMeta):
    time_entries: List[TimeEntryRead] = Field(alias="timeEntries")


class TimeEntryStats(BaseModel):
    """Logged hours: today, last 7 days, last 30 days, all time, billable all time."""
    today: float = 0.0
    week: float = 0.0
    month: float = 0.0
    total: float = 0.0
    billable: float = 0.0
