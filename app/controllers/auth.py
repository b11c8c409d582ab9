"""Authentication controller: login, registration, logout and profile."""

from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials

from app.config.settings import settings
from app.controllers.dependencies import (
    CurrentUserDep,
    SessionsDep,
    StoreDep,
    bearer_scheme,
    extract_session_token,
)
from app.models.user import User
from app.services.sessions import SessionRegistry
from app.telemetry import increment_login, increment_registration
from app.utils import hash_password, verify_password
from app.views import LoginRequest, MessageResponse, RegisterRequest, UserProfile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _open_session(response: Response, sessions: SessionRegistry, user: User) -> None:
    token, _ = sessions.issue(user)
    response.set_cookie(
        key=settings.security.session_cookie_name,
        value=token,
        max_age=int(sessions.lifetime.total_seconds()),
        httponly=True,
        secure=settings.security.session_cookie_secure,
        samesite="lax",
    )


@router.post("/login", response_model=UserProfile)
async def login(
    payload: LoginRequest,
    response: Response,
    store: StoreDep,
    sessions: SessionsDep,
) -> UserProfile:
    """Verify credentials and open a session."""

    user = store.get_user_by_username(payload.username)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("Rejected login for username %s", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    _open_session(response, sessions, user)
    increment_login(user.role.value)
    return UserProfile.model_validate(user)


@router.post(
    "/register",
    response_model=UserProfile,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    response: Response,
    store: StoreDep,
    sessions: SessionsDep,
) -> UserProfile:
    """Create an account and sign the new user in."""

    if store.get_user_by_username(payload.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already exists",
        )
    if store.get_user_by_email(payload.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists",
        )

    user = store.create_user(
        username=payload.username,
        password_hash=hash_password(payload.password),
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
        profile_image=payload.profile_image,
    )

    _open_session(response, sessions, user)
    increment_registration(user.role.value)
    return UserProfile.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    sessions: SessionsDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> MessageResponse:
    """Destroy the current session, if any."""

    token = extract_session_token(request, credentials)
    if token:
        sessions.revoke(token)
    response.delete_cookie(settings.security.session_cookie_name)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserProfile)
async def me(current_user: CurrentUserDep) -> UserProfile:
    return UserProfile.model_validate(current_user)
