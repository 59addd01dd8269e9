"""
Authentication Utility - JWT session cookie and password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- Cookie set/clear helpers for login and logout
- FastAPI dependencies that resolve the request's Session (or None)
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, Request, Response

from jobportal.core.access import Session
from jobportal.core.config import get_settings
from jobportal.db.repository import EntityRepository, get_repository
from jobportal.schemas.schemas import UserRole

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

COOKIE_MAX_AGE_SECONDS = 24 * 60 * 60


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def set_session_cookie(response: Response, user_id: str, role: UserRole) -> None:
    token = create_access_token(data={"sub": user_id, "role": role.value})
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=COOKIE_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


async def get_optional_session(
    request: Request,
    repo: EntityRepository = Depends(get_repository),
) -> Optional[Session]:
    """
    FastAPI dependency - Session for the request cookie, None if anonymous.

    A token that fails to decode, or whose user no longer exists, is
    treated as no session at all. The role comes from the stored user,
    not from the token.
    """
    token = request.cookies.get(settings.cookie_name)
    if not token:
        return None

    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        return None

    user = repo.get("users", payload["sub"])
    if not user:
        return None

    return Session(user_id=user["id"], role=UserRole(user["role"]))
