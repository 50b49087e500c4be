# services/time_entry_service.py
import logging
import uuid
from datetime import date
from typing import Any, Dict, Optional

from fastapi import status
from sqlmodel import Session

from core.database import transaction
from core.errors import AppError
from crud import projects as projects_crud
from crud import tasks as tasks_crud
from crud import time_entries as entries_crud
from crud.pagination import page_meta
from models.models import TimeEntry, User
from schemas.time_entry_schema import TimeEntryCreate, TimeEntryRead, TimeEntryUpdate

logger = logging.getLogger(__name__)

MAX_HOURS_PER_ENTRY = 24


def validate_hours(hours: float) -> None:
    if hours <= 0:
        raise AppError("Hours must be greater than 0", status.HTTP_400_BAD_REQUEST)
    if hours > MAX_HOURS_PER_ENTRY:
        raise AppError("Hours cannot exceed 24 for a single entry", status.HTTP_400_BAD_REQUEST)


def validate_date(entry_date: Optional[date], today: Optional[date] = None) -> None:
    if entry_date is not None and entry_date > (today or date.today()):
        raise AppError("Date cannot be in the future", status.HTTP_400_BAD_REQUEST)


def _check_references(session: Session, owner: User, values: Dict[str, Any]) -> None:
    if values.get("task_id") is not None and not tasks_crud.get_task(session, owner, values["task_id"]):
        raise AppError("Task not found", status.HTTP_404_NOT_FOUND)
    if values.get("project_id") is not None and not projects_crud.get_project(session, owner, values["project_id"]):
        raise AppError("Project not found", status.HTTP_404_NOT_FOUND)


def get_entry_or_404(session: Session, owner: User, entry_id: uuid.UUID) -> TimeEntry:
    entry = entries_crud.get_time_entry(session, owner, entry_id)
    if not entry:
        raise AppError("Time entry not found", status.HTTP_404_NOT_FOUND)
    return entry


def list_time_entries(
    session: Session,
    owner: User,
    *,
    task_id: Optional[uuid.UUID] = None,
    project_id: Optional[uuid.UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = 1,
    limit: int = 50,
) -> Dict[str, Any]:
    rows, total = entries_crud.list_time_entries(
        session,
        owner,
        task_id=task_id,
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return {"timeEntries": [TimeEntryRead.model_validate(e) for e in rows], **page_meta(total, page, limit)}


def create_time_entry(session: Session, owner: User, data: TimeEntryCreate) -> TimeEntry:
    validate_hours(data.hours)
    validate_date(data.date)
    values = data.model_dump()
    _check_references(session, owner, values)

    with transaction(session):
        entry = entries_crud.create_time_entry(session, owner, values)
    session.refresh(entry)
    return entry


def update_time_entry(session: Session, owner: User, entry_id: uuid.UUID, data: TimeEntryUpdate) -> TimeEntry:
    entry = get_entry_or_404(session, owner, entry_id)
    changes = data.model_dump(exclude_unset=True)

    for field in ("hours", "date", "billable"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    if "hours" in changes:
        validate_hours(changes["hours"])
    if "date" in changes:
        validate_date(changes["date"])
    _check_references(session, owner, changes)

    with transaction(session):
        entries_crud.apply_update(entry, changes)
        session.add(entry)
    session.refresh(entry)
    return entry


def delete_time_entry(session: Session, owner: User, entry_id: uuid.UUID) -> None:
    entry = get_entry_or_404(session, owner, entry_id)
    with transaction(session):
        session.delete(entry)


def time_entry_stats(session: Session, owner: User) -> Dict[str, float]:
    return entries_crud.time_entry_stats(session, owner)
