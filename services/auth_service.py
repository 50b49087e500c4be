# services/auth_service.py
"""
Accounts, sessions and the invitation lifecycle.

An invited user starts inactive with a single-use token. Accepting the
invitation sets the password, activates the account and clears the token.
An expired token stays on the row (status ``expired``) until an admin
resends the invitation, which issues a fresh token and expiry.
"""
import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Tuple

from fastapi import HTTPException, status
from sqlmodel import Session

from core.config import settings
from core.database import transaction
from core.errors import AppError
from core.security import (
    create_tokens_for_user,
    decode_refresh_token,
    generate_invitation_token,
    hash_password,
    parse_user_id,
    verify_password,
)
from crud import clients as clients_crud
from crud import users as users_crud
from models.models import Role, User, as_utc, utcnow
from schemas.user_schema import (
    InvitationCreate,
    ProfileUpdate,
    UserListItem,
    UserLogin,
    UserRead,
    UserRegister,
)

logger = logging.getLogger(__name__)


def _auth_result(user: User) -> Dict[str, Any]:
    token, refresh_token = create_tokens_for_user(user)
    return {"user": UserRead.model_validate(user), "token": token, "refreshToken": refresh_token}


def _invite_expiry() -> datetime:
    return utcnow() + timedelta(days=settings.INVITE_TOKEN_EXPIRE_DAYS)


def _ensure_clients_visible(session: Session, actor: User, client_ids: List[uuid.UUID]) -> None:
    visible = clients_crud.get_visible_client_ids(session, actor, client_ids)
    if any(cid not in visible for cid in client_ids):
        raise AppError("Client not found", status.HTTP_404_NOT_FOUND)


def _get_user_or_404(session: Session, user_id: uuid.UUID) -> User:
    user = session.get(User, user_id)
    if not user:
        raise AppError("User not found", status.HTTP_404_NOT_FOUND)
    return user


# ==========================================================
# ✅ Register / Login / Refresh
# ==========================================================
def register(session: Session, data: UserRegister) -> Dict[str, Any]:
    if users_crud.get_user_by_email(session, data.email):
        raise AppError("Email already in use", status.HTTP_409_CONFLICT)

    user = User(
        email=data.email.lower(),
        password_hash=hash_password(data.password),
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        role=Role.USER.value,
        is_active=True,
    )
    with transaction(session):
        session.add(user)
    session.refresh(user)
    logger.info("📝 Registered user %s", user.id)
    return _auth_result(user)


def login(session: Session, data: UserLogin) -> Dict[str, Any]:
    user = users_crud.get_user_by_email(session, data.email)
    if not user:
        logger.info("Login failed: unknown email")
        raise AppError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)
    if not user.is_active:
        raise AppError("Account is deactivated", status.HTTP_403_FORBIDDEN)
    if not verify_password(data.password, user.password_hash):
        logger.info("Login failed: bad password for user %s", user.id)
        raise AppError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)
    return _auth_result(user)


def refresh_tokens(session: Session, refresh_token: str) -> Dict[str, str]:
    try:
        payload = decode_refresh_token(refresh_token)
    except HTTPException:
        raise AppError("Invalid or expired refresh token", status.HTTP_401_UNAUTHORIZED)

    user_id = parse_user_id(payload.get("id"))
    user = session.get(User, user_id) if user_id else None
    if not user or not user.is_active:
        raise AppError("Invalid or expired refresh token", status.HTTP_401_UNAUTHORIZED)

    token, new_refresh = create_tokens_for_user(user)
    return {"token": token, "refreshToken": new_refresh}


# ==========================================================
# ✅ Profile
# ==========================================================
def update_profile(session: Session, user: User, data: ProfileUpdate) -> User:
    changes = data.model_dump(exclude_unset=True)
    for field in ("first_name", "last_name", "avatar_url"):
        if field in changes:
            setattr(user, field, changes[field])
    user.updated_at = utcnow()
    with transaction(session):
        session.add(user)
    session.refresh(user)
    return user


def change_password(session: Session, user: User, new_password: str) -> None:
    user.password_hash = hash_password(new_password)
    user.updated_at = utcnow()
    with transaction(session):
        session.add(user)
    logger.info("🔑 Password changed for user %s", user.id)


# ==========================================================
# ✅ Invitations
# ==========================================================
def invite_user(session: Session, inviter: User, data: InvitationCreate) -> Tuple[User, str]:
    """Create the pending account. Returns (user, invite_token); the caller sends the email."""
    if users_crud.get_user_by_email(session, data.email):
        raise AppError("Email already in use", status.HTTP_409_CONFLICT)
    _ensure_clients_visible(session, inviter, data.client_ids)

    invite_token = generate_invitation_token()
    user = User(
        email=data.email.lower(),
        password_hash="",
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        role=Role(data.role).value,
        is_active=False,
        invite_token=invite_token,
        invite_token_expiry=_invite_expiry(),
    )
    with transaction(session):
        session.add(user)
        session.flush()
        if data.client_ids:
            users_crud.set_user_client_ids(session, user.id, data.client_ids)
    session.refresh(user)
    logger.info("📨 User %s invited by %s with %d client(s)", user.id, inviter.id, len(data.client_ids))
    return user, invite_token


def resend_invitation(session: Session, user_id: uuid.UUID) -> Tuple[User, str]:
    user = _get_user_or_404(session, user_id)
    if user.is_active:
        raise AppError("User is already active", status.HTTP_400_BAD_REQUEST)
    if not user.invite_token:
        raise AppError("User does not have a pending invitation", status.HTTP_400_BAD_REQUEST)

    user.invite_token = generate_invitation_token()
    user.invite_token_expiry = _invite_expiry()
    user.updated_at = utcnow()
    with transaction(session):
        session.add(user)
    session.refresh(user)
    logger.info("📨 Invitation re-issued for user %s", user.id)
    return user, user.invite_token


def accept_invitation(session: Session, token: str, password: str) -> Dict[str, Any]:
    user = users_crud.get_user_by_invite_token(session, token)
    if not user:
        raise AppError("Invalid or expired invitation", status.HTTP_400_BAD_REQUEST)
    if user.invite_token_expiry and as_utc(user.invite_token_expiry) < utcnow():
        logger.info("Expired invitation presented for user %s", user.id)
        raise AppError("Invitation has expired", status.HTTP_400_BAD_REQUEST)

    user.password_hash = hash_password(password)
    user.is_active = True
    user.invite_token = None
    user.invite_token_expiry = None
    user.updated_at = utcnow()
    with transaction(session):
        session.add(user)
    session.refresh(user)
    logger.info("✅ Invitation accepted by user %s", user.id)
    return _auth_result(user)


def inviter_name(user: User) -> str:
    return f"{user.first_name or ''} {user.last_name or ''}".strip() or "Admin"


# ==========================================================
# ✅ User administration
# ==========================================================
def list_users(session: Session) -> List[UserListItem]:
    now = utcnow()
    return [
        UserListItem(
            id=u.id,
            email=u.email,
            first_name=u.first_name,
            last_name=u.last_name,
            role=u.role,
            is_active=u.is_active,
            is_pending=u.is_pending,
            invitation_status=u.invitation_status(now),
            invite_token_expiry=u.invite_token_expiry,
            created_at=u.created_at,
        )
        for u in users_crud.list_users(session)
    ]


def get_user_clients(session: Session, actor: User, user_id: uuid.UUID) -> List[uuid.UUID]:
    if not actor.is_admin and actor.id != user_id:
        raise AppError("Access denied", status.HTTP_403_FORBIDDEN)
    _get_user_or_404(session, user_id)
    return users_crud.get_user_client_ids(session, user_id)


def update_user_clients(session: Session, admin: User, user_id: uuid.UUID, client_ids: List[uuid.UUID]) -> List[uuid.UUID]:
    _get_user_or_404(session, user_id)
    _ensure_clients_visible(session, admin, client_ids)
    with transaction(session):
        assigned = users_crud.set_user_client_ids(session, user_id, client_ids)
    logger.info("🔗 User %s now assigned to %d client(s)", user_id, len(assigned))
    return assigned


def delete_user(session: Session, admin: User, user_id: uuid.UUID) -> None:
    if admin.id == user_id:
        raise AppError("You cannot delete your own account", status.HTTP_400_BAD_REQUEST)
    user = _get_user_or_404(session, user_id)
    with transaction(session):
        users_crud.delete_user(session, user)
    logger.info("🗑️ User %s deleted by %s", user_id, admin.id)
