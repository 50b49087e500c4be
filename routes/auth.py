# routes/auth.py
import uuid
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlmodel import Session

from core.database import get_session
from core.security import get_current_admin, get_current_user
from models.models import User
from schemas.common import ApiResponse
from schemas.user_schema import (
    AuthResult,
    ChangePasswordRequest,
    InvitationAccept,
    InvitationCreate,
    InvitationResult,
    ProfileUpdate,
    RefreshTokenRequest,
    TokenPair,
    UserClientsRead,
    UserClientsUpdate,
    UserListItem,
    UserLogin,
    UserRead,
    UserRegister,
)
from services import auth_service
from services.email_service import email_service

router = APIRouter(tags=["Authentication"])


# ==========================================================
# ✅ Public: register / login / refresh / accept invitation
# ==========================================================
@router.post("/register", response_model=ApiResponse[AuthResult], status_code=status.HTTP_201_CREATED)
def register(data: UserRegister, session: Session = Depends(get_session)):
    result = auth_service.register(session, data)
    return {"success": True, "data": result, "message": "User registered successfully"}


@router.post("/login", response_model=ApiResponse[AuthResult])
def login(data: UserLogin, session: Session = Depends(get_session)):
    result = auth_service.login(session, data)
    return {"success": True, "data": result, "message": "Login successful"}


@router.post("/refresh-token", response_model=ApiResponse[TokenPair])
def refresh_token(data: RefreshTokenRequest, session: Session = Depends(get_session)):
    return {"success": True, "data": auth_service.refresh_tokens(session, data.refresh_token)}


@router.post("/accept-invitation", response_model=ApiResponse[AuthResult])
def accept_invitation(data: InvitationAccept, session: Session = Depends(get_session)):
    result = auth_service.accept_invitation(session, data.token, data.password)
    return {"success": True, "data": result, "message": "Invitation accepted successfully"}


# ==========================================================
# ✅ Current user
# ==========================================================
@router.post("/logout", response_model=ApiResponse)
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards them
    return {"success": True, "message": "Logout successful"}


@router.get("/me", response_model=ApiResponse[UserRead])
def me(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": UserRead.model_validate(current_user)}


@router.get("/profile", response_model=ApiResponse[UserRead])
def get_profile(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": UserRead.model_validate(current_user)}


@router.put("/profile", response_model=ApiResponse[UserRead])
def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    user = auth_service.update_profile(session, current_user, data)
    return {"success": True, "data": UserRead.model_validate(user), "message": "Profile updated successfully"}


@router.put("/change-password", response_model=ApiResponse)
def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    auth_service.change_password(session, current_user, data.new_password)
    return {"success": True, "message": "Password changed successfully"}


# ==========================================================
# ✅ Admin: invitations & user management
# ==========================================================
@router.post("/invite", response_model=ApiResponse[InvitationResult], status_code=status.HTTP_201_CREATED)
def invite_user(
    data: InvitationCreate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    user, invite_token = auth_service.invite_user(session, admin, data)
    background_tasks.add_task(
        email_service.send_invite_email, user.email, invite_token, auth_service.inviter_name(admin)
    )
    return {
        "success": True,
        "data": {"message": "User invited successfully", "user": UserRead.model_validate(user)},
        "message": "User invited successfully",
    }


@router.get("/users", response_model=ApiResponse[List[UserListItem]])
def list_users(admin: User = Depends(get_current_admin), session: Session = Depends(get_session)):
    return {"success": True, "data": auth_service.list_users(session)}


@router.post("/users/{user_id}/resend-invite", response_model=ApiResponse[UserRead])
def resend_invite(
    user_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    user, invite_token = auth_service.resend_invitation(session, user_id)
    background_tasks.add_task(
        email_service.send_invite_email, user.email, invite_token, auth_service.inviter_name(admin)
    )
    return {"success": True, "data": UserRead.model_validate(user), "message": "Invitation resent successfully"}


@router.get("/{user_id}/clients", response_model=ApiResponse[UserClientsRead])
def get_user_clients(
    user_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    client_ids = auth_service.get_user_clients(session, current_user, user_id)
    return {"success": True, "data": {"client_ids": client_ids}}


@router.put("/{user_id}/clients", response_model=ApiResponse[UserClientsRead])
def update_user_clients(
    user_id: uuid.UUID,
    data: UserClientsUpdate,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    client_ids = auth_service.update_user_clients(session, admin, user_id, data.client_ids)
    return {"success": True, "data": {"client_ids": client_ids}, "message": "User clients updated successfully"}


@router.delete("/{user_id}", response_model=ApiResponse)
def delete_user(
    user_id: uuid.UUID,
    admin: User = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    auth_service.delete_user(session, admin, user_id)
    return {"success": True, "message": "User deleted successfully"}
