# project_schema.py
import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.models import ProjectStatus
from schemas.common import PageMeta, blank_to_none


class ProjectCreate(BaseModel):
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    budget: Optional[float] = Field(default=None, allow_inf_nan=False)
    deadline: Optional[date] = None
    notes: Optional[str] = None
    # At least one is required; the first becomes the project's primary client
    client_ids: List[uuid.UUID] = Field(default_factory=list)


    model_config = ConfigDict(use_enum_values=True)

    @field_validator("description", "budget", "deadline", "notes", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return blank_to_none(v)


class ProjectUpdate(BaseModel):
    """
    Partial update. ``client_ids`` left out of the payload keeps the current
    client links; sending it (even empty) replaces them.
    """
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    budget: Optional[float] = Field(default=None, allow_inf_nan=False)
    deadline: Optional[date] = None
    notes: Optional[str] = None
    client_ids: Optional[List[uuid.UUID]] = None


    model_config = ConfigDict(use_enum_values=True)

    @field_validator("description", "budget", "deadline", "notes", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        return blank_to_none(v)


class ProjectRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    client_id: Optional[uuid.UUID] = None
    client_ids: List[uuid.UUID] = Field(default_factory=list)
    name: str
    description: Optional[str] = None
    status: ProjectStatus
    budget: Optional[float] = None
    deadline: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectPage(PageMeta):
    projects: List[ProjectRead]


class ProjectStats(BaseModel):
    planning: int = 0
    active: int = 0
    on_hold: int = 0
    completed: int = 0
    cancelled: int = 0
    total: int = 0
