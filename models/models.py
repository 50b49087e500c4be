# models/models.py
import uuid
from datetime import date, datetime, timezone
from datetime import date as date_type
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


# ============================================================
# TIMESTAMPS (always UTC, always tz-aware)
# ============================================================
def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def timestamp_field(**kwargs):
    return Field(default_factory=utcnow, sa_type=DateTime(timezone=True), **kwargs)


# ============================================================
# ENUMS
# ============================================================
class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class InvitationStatus(str, Enum):
    ACTIVE = "active"
    INVITED = "invited"
    EXPIRED = "expired"


# ============================================================
# LINK MODELS
# ============================================================
class UserClientLink(SQLModel, table=True):
    __tablename__ = "user_clients"
    user_id: uuid.UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    client_id: uuid.UUID = Field(foreign_key="clients.id", primary_key=True, ondelete="CASCADE")
    created_at: datetime = timestamp_field()


class ProjectClientLink(SQLModel, table=True):
    __tablename__ = "project_clients"
    project_id: uuid.UUID = Field(foreign_key="projects.id", primary_key=True, ondelete="CASCADE")
    client_id: uuid.UUID = Field(foreign_key="clients.id", primary_key=True, ondelete="CASCADE")
    # Order the caller supplied the client ids in; lowest is the "first" client
    position: int = Field(default=0)
    created_at: datetime = timestamp_field()


# ============================================================
# USER
# ============================================================
class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True, nullable=False)
    password_hash: str = Field(default="", nullable=False)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    role: str = Field(default=Role.USER.value, max_length=20, index=True)
    avatar_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = Field(default=True)

    # Invitation flow
    invite_token: Optional[str] = Field(default=None, max_length=128, unique=True, index=True)
    invite_token_expiry: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    # Highest task position handed out so far; positions are never reused
    task_position_seq: int = Field(default=0)

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_pending(self) -> bool:
        return self.invite_token is not None

    def invitation_status(self, now: Optional[datetime] = None) -> InvitationStatus:
        if self.invite_token is None:
            return InvitationStatus.ACTIVE
        now = now or utcnow()
        if self.invite_token_expiry is not None and as_utc(self.invite_token_expiry) < now:
            return InvitationStatus.EXPIRED
        return InvitationStatus.INVITED


# ============================================================
# CLIENT
# ============================================================
class Client(SQLModel, table=True):
    __tablename__ = "clients"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    company: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    status: str = Field(default=ClientStatus.ACTIVE.value, max_length=20, index=True)
    notes: Optional[str] = None
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


# ============================================================
# PROJECT
# ============================================================
class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    # Mirrors the first client in project_clients (legacy single-client column)
    client_id: Optional[uuid.UUID] = Field(default=None, foreign_key="clients.id", index=True, ondelete="SET NULL")
    name: str = Field(max_length=255)
    description: Optional[str] = None
    status: str = Field(default=ProjectStatus.PLANNING.value, max_length=20, index=True)
    budget: Optional[float] = None
    deadline: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


# ============================================================
# TASK
# ============================================================
class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    project_id: Optional[uuid.UUID] = Field(default=None, foreign_key="projects.id", index=True, ondelete="SET NULL")
    title: str = Field(max_length=255)
    description: Optional[str] = None
    status: str = Field(default=TaskStatus.TODO.value, max_length=20, index=True)
    priority: str = Field(default=TaskPriority.MEDIUM.value, max_length=20)
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    position: int = Field(default=0, index=True)
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


# ============================================================
# TIME ENTRY
# ============================================================
class TimeEntry(SQLModel, table=True):
    __tablename__ = "time_entries"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    task_id: Optional[uuid.UUID] = Field(default=None, foreign_key="tasks.id", index=True, ondelete="SET NULL")
    project_id: Optional[uuid.UUID] = Field(default=None, foreign_key="projects.id", index=True, ondelete="SET NULL")
    description: Optional[str] = None
    hours: float
    date: date_type = Field(default_factory=date_type.today, index=True)
    billable: bool = Field(default=True)
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


# ============================================================
# EXPORTS
# ============================================================
__all__ = [
    "User",
    "Client",
    "Project",
    "Task",
    "TimeEntry",
    "UserClientLink",
    "ProjectClientLink",
    "Role",
    "ClientStatus",
    "ProjectStatus",
    "TaskStatus",
    "TaskPriority",
    "InvitationStatus",
]
