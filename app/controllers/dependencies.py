"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config.settings import settings
from app.models.user import User, UserRole
from app.services.sessions import SessionRecord, SessionRegistry
from app.services.storage import TrainingStore
from app.utils import AuthenticationError

bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> TrainingStore:
    return request.app.state.store


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


StoreDep = Annotated[TrainingStore, Depends(get_store)]
SessionsDep = Annotated[SessionRegistry, Depends(get_sessions)]


def extract_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """Return the session token from the cookie, falling back to a bearer header."""

    token = request.cookies.get(settings.security.session_cookie_name)
    if token:
        return token
    if credentials is not None and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return None


async def get_current_session(
    request: Request,
    sessions: SessionsDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> SessionRecord:
    """Resolve the live session for the request or reject it with a 401."""

    token = extract_session_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized. Please log in.",
        )

    try:
        record = sessions.resolve(token)
    except AuthenticationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized. Please log in.",
        ) from None

    request.state.user = {"id": record.user_id, "role": record.role.value}
    return record


CurrentSessionDep = Annotated[SessionRecord, Depends(get_current_session)]


async def get_current_user(
    session: CurrentSessionDep,
    store: StoreDep,
) -> User:
    user = store.get_user(session.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_role(*roles: UserRole):
    """Build a dependency admitting only sessions whose role is listed."""

    async def _require_role(session: CurrentSessionDep) -> SessionRecord:
        if session.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden. Insufficient permissions.",
            )
        return session

    return _require_role


StudentSessionDep = Annotated[SessionRecord, Depends(require_role(UserRole.STUDENT))]
InstructorSessionDep = Annotated[SessionRecord, Depends(require_role(UserRole.INSTRUCTOR))]


def resolve_student_id(session: SessionRecord, requested: Optional[int]) -> int:
    """Pick the student a new record belongs to.

    Students may only create records for themselves; instructors must name
    the student explicitly.
    """

    if session.role == UserRole.STUDENT:
        if requested is not None and requested != session.user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Students can only create records for themselves",
            )
        return session.user_id

    if requested is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="studentId is required",
        )
    return requested


__all__ = [
    "bearer_scheme",
    "extract_session_token",
    "get_store",
    "get_sessions",
    "get_current_session",
    "get_current_user",
    "require_role",
    "resolve_student_id",
    "StoreDep",
    "SessionsDep",
    "CurrentSessionDep",
    "CurrentUserDep",
    "StudentSessionDep",
    "InstructorSessionDep",
]
