# services/project_service.py
import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import status
from sqlmodel import Session

from core.database import transaction
from core.errors import AppError
from crud import clients as clients_crud
from crud import projects as projects_crud
from crud.pagination import page_meta
from models.models import Project, User
from schemas.project_schema import ProjectCreate, ProjectRead, ProjectUpdate

logger = logging.getLogger(__name__)


def to_read(project: Project, client_ids: List[uuid.UUID]) -> ProjectRead:
    data = ProjectRead.model_validate(project)
    data.client_ids = list(client_ids)
    return data


def _check_budget(budget: Optional[float]) -> None:
    if budget is not None and budget < 0:
        raise AppError("Budget cannot be negative", status.HTTP_400_BAD_REQUEST)


def _check_clients(session: Session, admin: User, client_ids: List[uuid.UUID]) -> List[uuid.UUID]:
    ordered = projects_crud.dedupe_ids(client_ids)
    visible = clients_crud.get_visible_client_ids(session, admin, ordered)
    if any(cid not in visible for cid in ordered):
        raise AppError("Client not found", status.HTTP_404_NOT_FOUND)
    return ordered


def get_project_or_404(session: Session, actor: User, project_id: uuid.UUID) -> Project:
    project = projects_crud.get_project(session, actor, project_id)
    if not project:
        raise AppError("Project not found", status.HTTP_404_NOT_FOUND)
    return project


def get_project(session: Session, actor: User, project_id: uuid.UUID) -> ProjectRead:
    project = get_project_or_404(session, actor, project_id)
    return to_read(project, projects_crud.get_client_ids(session, project.id))


def list_projects(
    session: Session,
    actor: User,
    *,
    status_filter: Optional[str] = None,
    client_id: Optional[uuid.UUID] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    rows, total = projects_crud.list_projects(
        session, actor, status=status_filter, client_id=client_id, search=search, page=page, limit=limit
    )
    links = projects_crud.get_client_ids_for(session, [p.id for p in rows])
    return {"projects": [to_read(p, links[p.id]) for p in rows], **page_meta(total, page, limit)}


def create_project(session: Session, admin: User, data: ProjectCreate) -> ProjectRead:
    if data.name is None or not data.name.strip():
        raise AppError("Project name is required", status.HTTP_400_BAD_REQUEST)
    if not data.client_ids:
        raise AppError("At least one client must be assigned to the project", status.HTTP_400_BAD_REQUEST)
    _check_budget(data.budget)
    client_ids = _check_clients(session, admin, data.client_ids)

    values = data.model_dump(exclude={"client_ids"})
    values["name"] = data.name.strip()
    with transaction(session):
        project = projects_crud.create_project(session, admin, values, client_ids)
    session.refresh(project)
    logger.info("Project %s created by %s with clients %s", project.id, admin.id, [str(c) for c in client_ids])
    return to_read(project, client_ids)


def update_project(session: Session, admin: User, project_id: uuid.UUID, data: ProjectUpdate) -> ProjectRead:
    project = get_project_or_404(session, admin, project_id)
    changes = data.model_dump(exclude_unset=True, exclude={"client_ids"})

    if "name" in changes:
        if changes["name"] is None or not changes["name"].strip():
            raise AppError("Project name cannot be empty", status.HTTP_400_BAD_REQUEST)
        changes["name"] = changes["name"].strip()
    if "status" in changes and changes["status"] is None:
        changes.pop("status")
    _check_budget(changes.get("budget"))

    # Omitted client_ids leaves the links alone; an explicit list (even empty) replaces them
    replace_clients = "client_ids" in data.model_fields_set
    client_ids: List[uuid.UUID] = []
    if replace_clients:
        client_ids = _check_clients(session, admin, data.client_ids or [])

    with transaction(session):
        projects_crud.apply_update(project, changes)
        session.add(project)
        if replace_clients:
            projects_crud.set_client_ids(session, project, client_ids)
    session.refresh(project)
    return to_read(project, projects_crud.get_client_ids(session, project.id))


def delete_project(session: Session, admin: User, project_id: uuid.UUID) -> None:
    project = get_project_or_404(session, admin, project_id)
    with transaction(session):
        session.delete(project)
    logger.info("Project %s deleted by %s", project_id, admin.id)


def project_stats(session: Session, actor: User) -> Dict[str, int]:
    return projects_crud.project_stats(session, actor)
