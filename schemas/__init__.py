from .client_schema import ClientCreate, ClientPage, ClientRead, ClientStats, ClientUpdate
from .common import ApiResponse, PageMeta
from .project_schema import ProjectCreate, ProjectPage, ProjectRead, ProjectStats, ProjectUpdate
from .task_schema import TaskCreate, TaskPage, TaskRead, TaskStats, TaskUpdate
from .time_entry_schema import TimeEntryCreate, TimeEntryPage, TimeEntryRead, TimeEntryStats, TimeEntryUpdate
from .user_schema import (
    AuthResult, ChangePasswordRequest, InvitationAccept, InvitationCreate, InvitationResult,
    ProfileUpdate, RefreshTokenRequest, TokenPair, UserClientsRead, UserClientsUpdate,
    UserListItem, UserLogin, UserRead, UserRegister
)

__all__ = [
    # Common
    "ApiResponse", "PageMeta",

    # Auth / users
    "UserRegister", "UserLogin", "UserRead", "UserListItem", "ProfileUpdate",
    "RefreshTokenRequest", "ChangePasswordRequest", "AuthResult", "TokenPair",
    "InvitationCreate", "InvitationAccept", "InvitationResult",
    "UserClientsUpdate", "UserClientsRead",

    # Client
    "ClientCreate", "ClientRead", "ClientUpdate", "ClientPage", "ClientStats",

    # Project
    "ProjectCreate", "ProjectRead", "ProjectUpdate", "ProjectPage", "ProjectStats",

    # Task
    "TaskCreate", "TaskRead", "TaskUpdate", "TaskPage", "TaskStats",

    # Time entry
    "TimeEntryCreate", "TimeEntryRead", "TimeEntryUpdate", "TimeEntryPage", "TimeEntryStats",
]
