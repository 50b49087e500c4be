# crud/clients.py
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import desc, or_
from sqlmodel import Session, select

from crud.pagination import count_by, paginate
from crud.projects import resync_primary_client
from crud.visibility import client_visibility
from models.models import Client, ClientStatus, Project, ProjectClientLink, User, UserClientLink, utcnow

# Columns a client update may touch
UPDATABLE_FIELDS = ("name", "email", "phone", "company", "address", "status", "notes")


def list_clients(
    session: Session,
    actor: User,
    *,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Client], int]:
    conditions = [client_visibility(actor)]
    if status:
        conditions.append(Client.status == status)
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(Client.name.ilike(pattern), Client.email.ilike(pattern), Client.company.ilike(pattern)))

    return paginate(session, Client, conditions, page, limit, order_by=[desc(Client.created_at), desc(Client.id)])


def get_client(session: Session, actor: User, client_id: uuid.UUID) -> Optional[Client]:
    query = select(Client).where(Client.id == client_id, client_visibility(actor))
    return session.exec(query).first()


def get_visible_client_ids(session: Session, actor: User, client_ids: Iterable[uuid.UUID]) -> set:
    ids = list(client_ids)
    if not ids:
        return set()
    query = select(Client.id).where(Client.id.in_(ids), client_visibility(actor))
    return set(session.exec(query).all())


def client_stats(session: Session, actor: User) -> Dict[str, int]:
    counts = count_by(session, Client.status, [client_visibility(actor)])
    stats = {s.value: counts.get(s.value, 0) for s in ClientStatus}
    stats["total"] = sum(counts.values())
    return stats


def create_client(session: Session, owner: User, values: Dict[str, Any]) -> Client:
    client = Client(user_id=owner.id, **values)
    session.add(client)
    session.flush()
    return client


def apply_update(client: Client, changes: Dict[str, Any]) -> Client:
    for field in UPDATABLE_FIELDS:
        if field in changes:
            setattr(client, field, changes[field])
    client.updated_at = utcnow()
    return client


def delete_client(session: Session, client: Client) -> List[uuid.UUID]:
    """
    Remove a client with its junction rows and repoint every project that used
    it at its next remaining client. Returns the ids of the resynced projects.
    Caller commits.
    """
    linked = session.exec(select(ProjectClientLink).where(ProjectClientLink.client_id == client.id)).all()
    affected = {link.project_id for link in linked}
    affected.update(session.exec(select(Project.id).where(Project.client_id == client.id)).all())

    for link in linked:
        session.delete(link)
    for assignment in session.exec(select(UserClientLink).where(UserClientLink.client_id == client.id)).all():
        session.delete(assignment)
    session.flush()

    for project_id in affected:
        resync_primary_client(session, project_id)
    session.flush()

    session.delete(client)
    session.flush()
    return sorted(affected, key=str)
