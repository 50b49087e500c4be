# services/client_service.py
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import status
from sqlmodel import Session

from core.database import transaction
from core.errors import AppError
from crud import clients as clients_crud
from crud.pagination import page_meta
from models.models import Client, User
from schemas.client_schema import ClientCreate, ClientRead, ClientUpdate

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise AppError(message, status.HTTP_400_BAD_REQUEST)
    return value.strip()


def get_client_or_404(session: Session, actor: User, client_id: uuid.UUID) -> Client:
    client = clients_crud.get_client(session, actor, client_id)
    if not client:
        raise AppError("Client not found", status.HTTP_404_NOT_FOUND)
    return client


def list_clients(
    session: Session,
    actor: User,
    *,
    status_filter: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    rows, total = clients_crud.list_clients(
        session, actor, status=status_filter, search=search, page=page, limit=limit
    )
    return {"clients": [ClientRead.model_validate(c) for c in rows], **page_meta(total, page, limit)}


def create_client(session: Session, admin: User, data: ClientCreate) -> Client:
    values = data.model_dump()
    values["name"] = _require_text(values.get("name"), "Client name is required")
    with transaction(session):
        client = clients_crud.create_client(session, admin, values)
    session.refresh(client)
    logger.info("Client %s created by %s", client.id, admin.id)
    return client


def update_client(session: Session, admin: User, client_id: uuid.UUID, data: ClientUpdate) -> Client:
    client = get_client_or_404(session, admin, client_id)
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes:
        changes["name"] = _require_text(changes["name"], "Client name cannot be empty")
    if "status" in changes and changes["status"] is None:
        changes.pop("status")

    with transaction(session):
        clients_crud.apply_update(client, changes)
        session.add(client)
    session.refresh(client)
    return client


def delete_client(session: Session, admin: User, client_id: uuid.UUID) -> None:
    client = get_client_or_404(session, admin, client_id)
    with transaction(session):
        resynced = clients_crud.delete_client(session, client)
    logger.info("Client %s deleted; %d project(s) resynced", client_id, len(resynced))


def client_stats(session: Session, actor: User) -> Dict[str, int]:
    return clients_crud.client_stats(session, actor)
