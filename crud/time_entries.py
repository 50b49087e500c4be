# crud/time_entries.py
import uuid
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import desc, func
from sqlmodel import Session, select

from crud.pagination import paginate
from models.models import TimeEntry, User, utcnow

UPDATABLE_FIELDS = ("task_id", "project_id", "description", "hours", "date", "billable")


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
) -> Tuple[List[TimeEntry], int]:
    conditions = [TimeEntry.user_id == owner.id]
    if task_id:
        conditions.append(TimeEntry.task_id == task_id)
    if project_id:
        conditions.append(TimeEntry.project_id == project_id)
    if start_date:
        conditions.append(TimeEntry.date >= start_date)
    if end_date:
        conditions.append(TimeEntry.date <= end_date)

    order_by = [desc(TimeEntry.date), desc(TimeEntry.created_at), desc(TimeEntry.id)]
    return paginate(session, TimeEntry, conditions, page, limit, order_by=order_by)


def get_time_entry(session: Session, owner: User, entry_id: uuid.UUID) -> Optional[TimeEntry]:
    return session.exec(select(TimeEntry).where(TimeEntry.id == entry_id, TimeEntry.user_id == owner.id)).first()


def _sum_hours(session: Session, *conditions) -> float:
    query = select(func.coalesce(func.sum(TimeEntry.hours), 0)).where(*conditions)
    return float(session.exec(query).one())


def time_entry_stats(session: Session, owner: User, today: Optional[date] = None) -> Dict[str, float]:
    today = today or date.today()
    mine = TimeEntry.user_id == owner.id
    return {
        "today": _sum_hours(session, mine, TimeEntry.date == today),
        "week": _sum_hours(session, mine, TimeEntry.date >= today - timedelta(days=7)),
        "month": _sum_hours(session, mine, TimeEntry.date >= today - timedelta(days=30)),
        "total": _sum_hours(session, mine),
        "billable": _sum_hours(session, mine, TimeEntry.billable == True),  # noqa: E712
    }


def create_time_entry(session: Session, owner: User, values: Dict[str, Any]) -> TimeEntry:
    values = {k: v for k, v in values.items() if not (k == "date" and v is None)}
    entry = TimeEntry(user_id=owner.id, **values)
    session.add(entry)
    session.flush()
    return entry


def apply_update(entry: TimeEntry, changes: Dict[str, Any]) -> TimeEntry:
    for field in UPDATABLE_FIELDS:
        if field in changes:
            setattr(entry, field, changes[field])
    entry.updated_at = utcnow()
    return entry
