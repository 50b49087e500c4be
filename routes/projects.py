# routes/projects.py
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from core.database import get_session
from core.security import get_current_admin, get_current_user
from models.models import ProjectStatus, User
from schemas.common import ApiResponse
from schemas.project_schema import ProjectCreate, ProjectPage, ProjectRead, ProjectStats, ProjectUpdate
from services import project_service

router = APIRouter(tags=["Projects"])


# ==================================================================
#  ✅ Get All Projects (filtered by client visibility)
# ==================================================================
@router.get("/", response_model=ApiResponse[ProjectPage])
def get_projects(
    status_filter: Optional[ProjectStatus] = Query(None, alias="status"),
    client_id: Optional[uuid.UUID] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    data = project_service.list_projects(
        session,
        current_user,
        status_filter=status_filter.value if status_filter else None,
        client_id=client_id,
        search=search,
        page=page,
        limit=limit,
    )
    return {"success": True, "data": data}


@router.get("/stats", response_model=ApiResponse[ProjectStats])
def get_project_stats(current_user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    return {"success": True, "data": project_service.project_stats(session, current_user)}


# ==================================================================
#  ✅ Get Single Project
# ==================================================================
@router.get("/{project_id}", response_model=ApiResponse[ProjectRead])
def get_project(
    project_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return {"success": True, "data": project_service.get_project(session, current_user, project_id)}


# ==================================================================
#  ✅ Create / Update / Delete (admin)
# ==================================================================
@router.post("/", response_model=ApiResponse[ProjectRead], status_code=status.HTTP_201_CREATED)
def create_project(
    data: ProjectCreate,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    project = project_service.create_project(session, admin, data)
    return {"success": True, "data": project, "message": "Project created successfully"}


@router.put("/{project_id}", response_model=ApiResponse[ProjectRead])
def update_project(
    project_id: uuid.UUID,
    data: ProjectUpdate,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    project = project_service.update_project(session, admin, project_id, data)
    return {"success": True, "data": project, "message": "Project updated successfully"}


@router.delete("/{project_id}", response_model=ApiResponse)
def delete_project(
    project_id: uuid.UUID,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    project_service.delete_project(session, admin, project_id)
    return {"success": True, "message": "Project deleted successfully"}
