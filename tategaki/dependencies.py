"""Request guards for protected operations.

Every protected route depends on one of these. The session manager for the
running app lives on ``app.state`` so the admin and editor apps never read
each other's cookies.
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, Response, status

from tategaki.errors import LoginRedirect
from tategaki.models.user import UserEntry
from tategaki.services.sessions import SessionManager
from tategaki.services.users import user_store

UNAUTHENTICATED_DETAIL = "Authentication required"


def _unauthenticated(request: Request, manager: SessionManager) -> HTTPException:
    headers = None
    if request.cookies.get(manager.cookie_name):
        headers = {"set-cookie": manager.cleared_cookie_header()}
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=UNAUTHENTICATED_DETAIL,
        headers=headers,
    )


@dataclass(frozen=True)
class SessionUser:
    session_id: str
    expires_at: int
    user: UserEntry


@dataclass(frozen=True)
class AdminSession:
    login_id: str
    expires_at: int


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_optional_user_session(
    request: Request,
    response: Response,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionUser | None:
    record = manager.get_session(request, response)
    if record is None:
        return None
    user = user_store.get_user(record.subject_id)
    if user is None:
        manager.clear_cookie(response)
        return None
    return SessionUser(session_id=record.token, expires_at=record.expires_at, user=user)


def require_user_session(
    request: Request,
    session: SessionUser | None = Depends(get_optional_user_session),
    manager: SessionManager = Depends(get_session_manager),
) -> SessionUser:
    if session is None:
        raise _unauthenticated(request, manager)
    return session


def get_optional_admin_session(
    request: Request,
    response: Response,
    manager: SessionManager = Depends(get_session_manager),
) -> AdminSession | None:
    record = manager.get_session(request, response)
    if record is None:
        return None
    return AdminSession(login_id=record.subject_id, expires_at=record.expires_at)


def require_admin_session(
    request: Request,
    session: AdminSession | None = Depends(get_optional_admin_session),
    manager: SessionManager = Depends(get_session_manager),
) -> AdminSession:
    if session is None:
        raise _unauthenticated(request, manager)
    return session


def require_admin_page(
    session: AdminSession | None = Depends(get_optional_admin_session),
) -> AdminSession:
    if session is None:
        raise LoginRedirect("/login")
    return session
