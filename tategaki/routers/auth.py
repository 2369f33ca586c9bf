import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from tategaki.dependencies import SessionUser, get_optional_user_session, get_session_manager
from tategaki.errors import EmailConflictError, InvalidCredentialsError
from tategaki.schemas.auth import (
    LogoutResponse,
    SessionStatusResponse,
    UserLoginRequest,
    UserSessionResponse,
)
from tategaki.services.credentials import UserCredentialValidator
from tategaki.services.sessions import SessionManager
from tategaki.services.users import UserStore

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_credential_validator(request: Request) -> UserCredentialValidator:
    return request.app.state.credential_validator


@router.post("/login", response_model=UserSessionResponse)
def login(
    payload: UserLoginRequest,
    response: Response,
    validator: UserCredentialValidator = Depends(get_credential_validator),
    manager: SessionManager = Depends(get_session_manager),
) -> UserSessionResponse:
    try:
        if payload.mode == "signup":
            user = validator.signup(payload.email, payload.password, payload.display_name)
        else:
            user = validator.login(payload.email, payload.password, payload.display_name)
    except InvalidCredentialsError as exc:
        LOGGER.info("user login rejected mode=%s", payload.mode)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        ) from exc
    except EmailConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from exc

    record = manager.create_session(response, user.id)
    return UserSessionResponse(user=UserStore.to_summary(user), expires_at=record.expires_at)


@router.post("/logout", response_model=LogoutResponse)
def logout(
    request: Request,
    response: Response,
    manager: SessionManager = Depends(get_session_manager),
) -> LogoutResponse:
    manager.destroy_session(request, response)
    return LogoutResponse()


@router.get(
    "/session",
    response_model=SessionStatusResponse,
    response_model_exclude_unset=True,
)
def get_session(
    session: SessionUser | None = Depends(get_optional_user_session),
) -> SessionStatusResponse:
    if session is None:
        return SessionStatusResponse(user=None)
    return SessionStatusResponse(
        user=UserStore.to_summary(session.user),
        expires_at=session.expires_at,
    )
