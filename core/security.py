# core/security.py
import logging
import secrets
import uuid
from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import Session

from core.config import settings
from core.database import get_session
from models.models import Role, User, utcnow

logger = logging.getLogger(__name__)


# ========================================
# 🔑 JWT / APP CONFIG
# ========================================
SECRET_KEY = settings.SECRET_KEY
REFRESH_SECRET_KEY = settings.REFRESH_KEY
ALGORITHM = settings.ALGORITHM or "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


# ========================================
# 🔐 Password Hashing (Argon2)
# ========================================
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash password using Argon2."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password using Argon2. Accounts without a password never verify."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


# ========================================
# 🔑 Token Helpers
# ========================================
def token_payload(user: User) -> Dict[str, Any]:
    return {"id": str(user.id), "email": user.email, "role": user.role}


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_refresh_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, REFRESH_SECRET_KEY, algorithm=ALGORITHM)


def _decode(token: str, key: str) -> dict:
    try:
        return jwt.decode(token, key, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def decode_token(token: str) -> dict:
    """Decode an access token and return its payload."""
    return _decode(token, SECRET_KEY)


def decode_refresh_token(token: str) -> dict:
    return _decode(token, REFRESH_SECRET_KEY)


def create_tokens_for_user(user: User) -> tuple[str, str]:
    """Return (access, refresh) token pair."""
    data = token_payload(user)
    return create_access_token(data), create_refresh_token(data)


# ========================================
# 📧 Invitation Tokens
# ========================================
def generate_invitation_token() -> str:
    """32 random bytes, hex encoded (64 chars)."""
    return secrets.token_hex(32)


def parse_user_id(raw: Any) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError):
        return None


# ========================================
# 👤 Authentication & Role Checks
# ========================================
def get_current_user(token: str = Depends(oauth2_scheme), session: Session = Depends(get_session)) -> User:
    """Extract user from token and load full record from DB."""
    payload = decode_token(token)
    user_id = parse_user_id(payload.get("id"))
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")
    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require the admin role. This is the only place admin-only routes check roles."""
    if current_user.role != Role.ADMIN.value:
        logger.info("Non-admin %s denied admin-only operation", current_user.id)
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return current_user
