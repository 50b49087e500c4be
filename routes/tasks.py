# routes/tasks.py
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from core.database import get_session
from core.security import get_current_user
from models.models import TaskPriority, TaskStatus, User
from schemas.common import ApiResponse
from schemas.task_schema import TaskCreate, TaskPage, TaskRead, TaskStats, TaskUpdate
from services import task_service

router = APIRouter(tags=["Tasks"])


@router.get("/", response_model=ApiResponse[TaskPage])
def list_tasks(
    project_id: Optional[uuid.UUID] = Query(None),
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    data = task_service.list_tasks(
        session,
        current_user,
        project_id=project_id,
        status_filter=status_filter.value if status_filter else None,
        priority=priority.value if priority else None,
        search=search,
        page=page,
        limit=limit,
    )
    return {"success": True, "data": data}


@router.get("/stats", response_model=ApiResponse[TaskStats])
def task_stats(
    project_id: Optional[uuid.UUID] = Query(None),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return {"success": True, "data": task_service.task_stats(session, current_user, project_id)}


@router.get("/{task_id}", response_model=ApiResponse[TaskRead])
def get_task(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    task = task_service.get_task_or_404(session, current_user, task_id)
    return {"success": True, "data": TaskRead.model_validate(task)}


@router.post("/", response_model=ApiResponse[TaskRead], status_code=status.HTTP_201_CREATED)
def create_task(
    data: TaskCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    task = task_service.create_task(session, current_user, data)
    return {"success": True, "data": TaskRead.model_validate(task), "message": "Task created successfully"}


@router.put("/{task_id}", response_model=ApiResponse[TaskRead])
def update_task(
    task_id: uuid.UUID,
    data: TaskUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    task = task_service.update_task(session, current_user, task_id, data)
    return {"success": True, "data": TaskRead.model_validate(task), "message": "Task updated successfully"}


@router.delete("/{task_id}", response_model=ApiResponse)
def delete_task(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    task_service.delete_task(session, current_user, task_id)
    return {"success": True, "message": "Task deleted successfully"}
