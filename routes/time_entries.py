# routes/time_entries.py
import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from core.database import get_session
from core.security import get_current_user
from models.models import User
from schemas.common import ApiResponse
from schemas.time_entry_schema import (
    TimeEntryCreate,
    TimeEntryPage,
    TimeEntryRead,
    TimeEntryStats,
    TimeEntryUpdate,
)
from services import time_entry_service

router = APIRouter(tags=["Time Entries"])


# ==========================================================
# ✅ List / stats / detail
# ==========================================================
@router.get("/", response_model=ApiResponse[TimeEntryPage])
def list_time_entries(
    task_id: Optional[uuid.UUID] = Query(None),
    project_id: Optional[uuid.UUID] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    data = time_entry_service.list_time_entries(
        session,
        current_user,
        task_id=task_id,
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return {"success": True, "data": data}


@router.get("/stats", response_model=ApiResponse[TimeEntryStats])
def time_entry_stats(current_user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    return {"success": True, "data": time_entry_service.time_entry_stats(session, current_user)}


@router.get("/{entry_id}", response_model=ApiResponse[TimeEntryRead])
def get_time_entry(
    entry_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    entry = time_entry_service.get_entry_or_404(session, current_user, entry_id)
    return {"success": True, "data": TimeEntryRead.model_validate(entry)}


# ==========================================================
# ✅ Writes
# ==========================================================
@router.post("/", response_model=ApiResponse[TimeEntryRead], status_code=status.HTTP_201_CREATED)
def create_time_entry(
    data: TimeEntryCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    entry = time_entry_service.create_time_entry(session, current_user, data)
    return {"success": True, "data": TimeEntryRead.model_validate(entry), "message": "Time entry created successfully"}


@router.put("/{entry_id}", response_model=ApiResponse[TimeEntryRead])
def update_time_entry(
    entry_id: uuid.UUID,
    data: TimeEntryUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    entry = time_entry_service.update_time_entry(session, current_user, entry_id, data)
    return {"success": True, "data": TimeEntryRead.model_validate(entry), "message": "Time entry updated successfully"}


@router.delete("/{entry_id}", response_model=ApiResponse)
def delete_time_entry(
    entry_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    time_entry_service.delete_time_entry(session, current_user, entry_id)
    return {"success": True, "message": "Time entry deleted successfully"}
