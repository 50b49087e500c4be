# routes/clients.py
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from core.database import get_session
from core.security import get_current_admin, get_current_user
from models.models import ClientStatus, User
from schemas.client_schema import ClientCreate, ClientPage, ClientRead, ClientStats, ClientUpdate
from schemas.common import ApiResponse
from services import client_service

router = APIRouter(tags=["Clients"])


# ==================================================================
#  ✅ List clients visible to the caller
# ==================================================================
@router.get("/", response_model=ApiResponse[ClientPage])
def list_clients(
    status_filter: Optional[ClientStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    data = client_service.list_clients(
        session,
        current_user,
        status_filter=status_filter.value if status_filter else None,
        search=search,
        page=page,
        limit=limit,
    )
    return {"success": True, "data": data}


# Declared before /{client_id} so "stats" is not parsed as an id
@router.get("/stats", response_model=ApiResponse[ClientStats])
def client_stats(current_user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    return {"success": True, "data": client_service.client_stats(session, current_user)}


@router.get("/{client_id}", response_model=ApiResponse[ClientRead])
def get_client(
    client_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    client = client_service.get_client_or_404(session, current_user, client_id)
    return {"success": True, "data": ClientRead.model_validate(client)}


# ==================================================================
#  ✅ Admin-only writes
# ==================================================================
@router.post("/", response_model=ApiResponse[ClientRead], status_code=status.HTTP_201_CREATED)
def create_client(
    data: ClientCreate,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    client = client_service.create_client(session, admin, data)
    return {"success": True, "data": ClientRead.model_validate(client), "message": "Client created successfully"}


@router.put("/{client_id}", response_model=ApiResponse[ClientRead])
def update_client(
    client_id: uuid.UUID,
    data: ClientUpdate,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    client = client_service.update_client(session, admin, client_id, data)
    return {"success": True, "data": ClientRead.model_validate(client), "message": "Client updated successfully"}


@router.delete("/{client_id}", response_model=ApiResponse)
def delete_client(
    client_id: uuid.UUID,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    client_service.delete_client(session, admin, client_id)
    return {"success": True, "message": "Client deleted successfully"}
