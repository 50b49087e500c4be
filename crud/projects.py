# crud/projects.py
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import desc, or_
from sqlmodel import Session, select

from crud.pagination import count_by, paginate
from crud.visibility import project_visibility
from models.models import Project, ProjectClientLink, ProjectStatus, User, utcnow

UPDATABLE_FIELDS = ("name", "description", "status", "budget", "deadline", "notes")


def dedupe_ids(ids: Sequence[uuid.UUID]) -> List[uuid.UUID]:
    """Drop repeated ids, keeping the first occurrence and the caller's order."""
    seen = set()
    ordered = []
    for value in ids:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# ============================================================
# ✅ Reads
# ============================================================
def list_projects(
    session: Session,
    actor: User,
    *,
    status: Optional[str] = None,
    client_id: Optional[uuid.UUID] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Project], int]:
    conditions = [project_visibility(actor)]
    if client_id:
        serving = select(ProjectClientLink.project_id).where(ProjectClientLink.client_id == client_id)
        conditions.append(Project.id.in_(serving))
    if status:
        conditions.append(Project.status == status)
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(Project.name.ilike(pattern), Project.description.ilike(pattern)))

    return paginate(session, Project, conditions, page, limit, order_by=[desc(Project.created_at), desc(Project.id)])


def get_project(session: Session, actor: User, project_id: uuid.UUID) -> Optional[Project]:
    query = select(Project).where(Project.id == project_id, project_visibility(actor))
    return session.exec(query).first()


def project_stats(session: Session, actor: User) -> Dict[str, int]:
    counts = count_by(session, Project.status, [project_visibility(actor)])
    stats = {s.value: counts.get(s.value, 0) for s in ProjectStatus}
    stats["total"] = sum(counts.values())
    return stats


# ============================================================
# ✅ Client links
# ============================================================
def get_client_ids(session: Session, project_id: uuid.UUID) -> List[uuid.UUID]:
    query = (
        select(ProjectClientLink.client_id)
        .where(ProjectClientLink.project_id == project_id)
        .order_by(ProjectClientLink.position, ProjectClientLink.created_at)
    )
    return list(session.exec(query).all())


def get_client_ids_for(session: Session, project_ids: Sequence[uuid.UUID]) -> Dict[uuid.UUID, List[uuid.UUID]]:
    """Ordered client ids for several projects with one query."""
    result: Dict[uuid.UUID, List[uuid.UUID]] = {pid: [] for pid in project_ids}
    if not project_ids:
        return result
    query = (
        select(ProjectClientLink)
        .where(ProjectClientLink.project_id.in_(list(project_ids)))
        .order_by(ProjectClientLink.project_id, ProjectClientLink.position)
    )
    for link in session.exec(query).all():
        result[link.project_id].append(link.client_id)
    return result


def set_client_ids(session: Session, project: Project, client_ids: Sequence[uuid.UUID]) -> None:
    """Replace the project's client set and point ``client_id`` at the first one (or NULL)."""
    for link in session.exec(select(ProjectClientLink).where(ProjectClientLink.project_id == project.id)).all():
        session.delete(link)
    session.flush()

    ordered = dedupe_ids(client_ids)
    for position, client_id in enumerate(ordered):
        session.add(ProjectClientLink(project_id=project.id, client_id=client_id, position=position))

    project.client_id = ordered[0] if ordered else None
    session.add(project)
    session.flush()


def resync_primary_client(session: Session, project_id: uuid.UUID) -> Optional[uuid.UUID]:
    project = session.get(Project, project_id)
    if project is None:
        return None
    remaining = get_client_ids(session, project_id)
    project.client_id = remaining[0] if remaining else None
    project.updated_at = utcnow()
    session.add(project)
    return project.client_id


# ============================================================
# ✅ Writes (caller commits)
# ============================================================
def create_project(
    session: Session, owner: User, values: Dict[str, Any], client_ids: Sequence[uuid.UUID]
) -> Project:
    project = Project(user_id=owner.id, **values)
    session.add(project)
    session.flush()
    set_client_ids(session, project, client_ids)
    return project


def apply_update(project: Project, changes: Dict[str, Any]) -> Project:
    for field in UPDATABLE_FIELDS:
        if field in changes:
            setattr(project, field, changes[field])
    project.updated_at = utcnow()
    return project
