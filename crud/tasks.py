# crud/tasks.py
import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import desc, func, or_
from sqlmodel import Session, select

from crud.pagination import count_by, paginate
from models.models import Task, TaskStatus, User, utcnow

UPDATABLE_FIELDS = (
    "title",
    "description",
    "project_id",
    "status",
    "priority",
    "due_date",
    "estimated_hours",
    "actual_hours",
    "position",
)


def list_tasks(
    session: Session,
    owner: User,
    *,
    project_id: Optional[uuid.UUID] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
) -> Tuple[List[Task], int]:
    conditions = [Task.user_id == owner.id]
    if project_id:
        conditions.append(Task.project_id == project_id)
    if status:
        conditions.append(Task.status == status)
    if priority:
        conditions.append(Task.priority == priority)
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(Task.title.ilike(pattern), Task.description.ilike(pattern)))

    return paginate(session, Task, conditions, page, limit, order_by=[Task.position, desc(Task.created_at), Task.id])


def get_task(session: Session, owner: User, task_id: uuid.UUID) -> Optional[Task]:
    return session.exec(select(Task).where(Task.id == task_id, Task.user_id == owner.id)).first()


def task_stats(session: Session, owner: User, project_id: Optional[uuid.UUID] = None) -> Dict[str, int]:
    conditions = [Task.user_id == owner.id]
    if project_id:
        conditions.append(Task.project_id == project_id)
    counts = count_by(session, Task.status, conditions)
    stats = {s.value: counts.get(s.value, 0) for s in TaskStatus}
    stats["total"] = sum(counts.values())
    return stats


def next_position(session: Session, owner: User) -> int:
    """
    Hand out the next manual-ordering slot for ``owner``.

    The high-water mark lives on the user row, so deleting the newest task
    never frees its position for reuse.
    """
    current_max = session.exec(select(func.max(Task.position)).where(Task.user_id == owner.id)).one() or 0
    position = max(owner.task_position_seq or 0, current_max) + 1
    owner.task_position_seq = position
    session.add(owner)
    return position


def create_task(session: Session, owner: User, values: Dict[str, Any]) -> Task:
    task = Task(user_id=owner.id, position=next_position(session, owner), **values)
    session.add(task)
    session.flush()
    return task


def apply_update(task: Task, changes: Dict[str, Any]) -> Task:
    for field in UPDATABLE_FIELDS:
        if field in changes:
            setattr(task, field, changes[field])
    task.updated_at = utcnow()
    return task
