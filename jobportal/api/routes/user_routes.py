"""
User Routes

POST /user/register - Register new user (applicant or recruiter)
POST /user/login - Login; sets the session cookie
POST /user/logout - Clear the session cookie
GET /user/me - Current user (session check used to hydrate the client)
POST /user/profile/update - Update own profile (role cannot change)
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Response

from jobportal.core.access import Action, Session, authorize, ensure_allowed
from jobportal.core.auth import clear_session_cookie, get_optional_session, set_session_cookie, verify_password
from jobportal.db.repository import DuplicateEntityError, EntityRepository, get_repository
from jobportal.services.entity_service import UserService
from jobportal.schemas.schemas import (
    LoginRequest, MessageResponse, ProfileUpdate, RegisterRequest, UserEnvelope, UserResponse,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Users"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest, repo: EntityRepository = Depends(get_repository)):
    """Register a new account. Login afterwards to get a session."""
    try:
        UserService(repo).create(request)
    except DuplicateEntityError:
        raise HTTPException(status_code=400, detail="User already exists with this email")

    return MessageResponse(message="Account created successfully")


@router.post("/login", response_model=UserEnvelope)
async def login(request: LoginRequest, response: Response, repo: EntityRepository = Depends(get_repository)):
    """
    Verify credentials and issue the session cookie.

    The requested role must match the account's role.
    """
    user = UserService(repo).get_by_email(request.email)
    if not user or not verify_password(request.password, user["password"]):
        raise HTTPException(status_code=400, detail="Incorrect email or password")

    if user["role"] != request.role.value:
        raise HTTPException(status_code=400, detail="Account doesn't exist with current role")

    set_session_cookie(response, user["id"], request.role)
    log.info(f"User {user['id']} logged in as {user['role']}")

    return UserEnvelope(
        message=f"Welcome back {user['fullname']}",
        user=UserResponse(**UserService.public(user)),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie. Safe to call without a session."""
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserEnvelope)
async def get_me(
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Get current authenticated user's info."""
    ensure_allowed(authorize(session, Action.read_account))
    user = UserService(repo).get(session.user_id)
    return UserEnvelope(message="Session is valid", user=UserResponse(**UserService.public(user)))


@router.post("/profile/update", response_model=UserEnvelope)
async def update_profile(
    data: ProfileUpdate,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Update own profile. Only provided fields change."""
    ensure_allowed(authorize(session, Action.read_account))
    users = UserService(repo)

    try:
        user = users.update_profile(users.get(session.user_id), data)
    except DuplicateEntityError:
        raise HTTPException(status_code=400, detail="Email already in use")

    return UserEnvelope(message="Profile updated successfully", user=UserResponse(**UserService.public(user)))
