# user_schema.py
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from models.models import InvitationStatus, Role


# ---------------------------
# Register & Login
# ---------------------------
class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., alias="firstName", min_length=2, max_length=100)
    last_name: str = Field(..., alias="lastName", min_length=2, max_length=100)

    model_config = ConfigDict(populate_by_name=True)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class ChangePasswordRequest(BaseModel):
    new_password: str = Field(..., alias="newPassword", min_length=6)

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------
# Read / Update
# ---------------------------
class UserRead(BaseModel):
    id: uuid.UUID
    email: EmailStr
    first_name: str
    last_name: str
    role: Role
    avatar_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserListItem(BaseModel):
    id: uuid.UUID
    email: EmailStr
    first_name: str
    last_name: str
    role: Role
    is_active: bool
    is_pending: bool
    invitation_status: InvitationStatus
    invite_token_expiry: Optional[datetime] = None
    created_at: datetime


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=500)


class AuthResult(BaseModel):
    user: UserRead
    token: str
    refresh_token: str = Field(alias="refreshToken")

    model_config = ConfigDict(populate_by_name=True)


class TokenPair(BaseModel):
    token: str
    refresh_token: str = Field(alias="refreshToken")

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------
# Invitations
# ---------------------------
class InvitationCreate(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Role = Role.USER
    client_ids: List[uuid.UUID] = Field(default_factory=list)


class InvitationAccept(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)


class InvitationResult(BaseModel):
    message: str
    user: UserRead


# ---------------------------
# Client assignments
# ---------------------------
class UserClientsUpdate(BaseModel):
    client_ids: List[uuid.UUID] = Field(default_factory=list)


class UserClientsRead(BaseModel):
    client_ids: List[uuid.UUID]
