# services/task_service.py
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import status
from sqlmodel import Session

from core.database import transaction
from core.errors import AppError
from crud import projects as projects_crud
from crud import tasks as tasks_crud
from crud.pagination import page_meta
from models.models import Task, User
from schemas.task_schema import TaskCreate, TaskRead, TaskUpdate

logger = logging.getLogger(__name__)


def _check_hours(values: Dict[str, Any]) -> None:
    if values.get("estimated_hours") is not None and values["estimated_hours"] < 0:
        raise AppError("Estimated hours cannot be negative", status.HTTP_400_BAD_REQUEST)
    if values.get("actual_hours") is not None and values["actual_hours"] < 0:
        raise AppError("Actual hours cannot be negative", status.HTTP_400_BAD_REQUEST)


def _ensure_project_visible(session: Session, actor: User, project_id: Optional[uuid.UUID]) -> None:
    if project_id is not None and not projects_crud.get_project(session, actor, project_id):
        raise AppError("Project not found", status.HTTP_404_NOT_FOUND)


def get_task_or_404(session: Session, owner: User, task_id: uuid.UUID) -> Task:
    task = tasks_crud.get_task(session, owner, task_id)
    if not task:
        raise AppError("Task not found", status.HTTP_404_NOT_FOUND)
    return task


def list_tasks(
    session: Session,
    owner: User,
    *,
    project_id: Optional[uuid.UUID] = None,
    status_filter: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
) -> Dict[str, Any]:
    rows, total = tasks_crud.list_tasks(
        session,
        owner,
        project_id=project_id,
        status=status_filter,
        priority=priority,
        search=search,
        page=page,
        limit=limit,
    )
    return {"tasks": [TaskRead.model_validate(t) for t in rows], **page_meta(total, page, limit)}


def create_task(session: Session, owner: User, data: TaskCreate) -> Task:
    if data.title is None or not data.title.strip():
        raise AppError("Task title is required", status.HTTP_400_BAD_REQUEST)
    if data.project_id is None:
        raise AppError("Project is required", status.HTTP_400_BAD_REQUEST)
    if data.due_date is None:
        raise AppError("Due date is required", status.HTTP_400_BAD_REQUEST)

    values = data.model_dump()
    values["title"] = data.title.strip()
    _check_hours(values)
    _ensure_project_visible(session, owner, data.project_id)

    with transaction(session):
        task = tasks_crud.create_task(session, owner, values)
    session.refresh(task)
    logger.debug("Task %s created at position %s", task.id, task.position)
    return task


def update_task(session: Session, owner: User, task_id: uuid.UUID, data: TaskUpdate) -> Task:
    task = get_task_or_404(session, owner, task_id)
    changes = data.model_dump(exclude_unset=True)

    if "title" in changes:
        if changes["title"] is None or not changes["title"].strip():
            raise AppError("Task title cannot be empty", status.HTTP_400_BAD_REQUEST)
        changes["title"] = changes["title"].strip()
    for field in ("status", "priority", "position"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    _check_hours(changes)
    if "project_id" in changes:
        _ensure_project_visible(session, owner, changes["project_id"])

    with transaction(session):
        tasks_crud.apply_update(task, changes)
        session.add(task)
    session.refresh(task)
    return task


def delete_task(session: Session, owner: User, task_id: uuid.UUID) -> None:
    task = get_task_or_404(session, owner, task_id)
    with transaction(session):
        session.delete(task)


def task_stats(session: Session, owner: User, project_id: Optional[uuid.UUID] = None) -> Dict[str, int]:
    return tasks_crud.task_stats(session, owner, project_id)
