"""Admin console: single-account login, request review and listings."""

import html
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import HTMLResponse

from tategaki.dependencies import (
    AdminSession,
    get_optional_admin_session,
    get_session_manager,
    require_admin_page,
    require_admin_session,
)
from tategaki.schemas.auth import (
    AdminLoginRequest,
    AdminPrincipal,
    AdminSessionStatusResponse,
    OkResponse,
)
from tategaki.schemas.documents import AdminDocumentListResponse
from tategaki.schemas.feature_requests import (
    FeatureRequestListResponse,
    FeatureRequestStatusUpdate,
    FeatureRequestUpdatedResponse,
)
from tategaki.schemas.users import AdminUserSummary
from tategaki.services.credentials import AdminCredentialValidator
from tategaki.services.documents import document_store
from tategaki.services.feature_requests import feature_request_store
from tategaki.services.sessions import SessionManager
from tategaki.services.users import user_store

LOGGER = logging.getLogger(__name__)

api_router = APIRouter(tags=["admin"])
page_router = APIRouter(tags=["admin-pages"])


def get_admin_validator(request: Request) -> AdminCredentialValidator:
    return request.app.state.credential_validator


@api_router.post("/auth/login", response_model=OkResponse)
def admin_login(
    payload: AdminLoginRequest,
    response: Response,
    validator: AdminCredentialValidator = Depends(get_admin_validator),
    manager: SessionManager = Depends(get_session_manager),
) -> OkResponse:
    if not validator.validate(payload.login_id, payload.password):
        LOGGER.info("admin login rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid login id or password",
        )
    manager.create_session(response, payload.login_id)
    return OkResponse()


@api_router.post("/auth/logout", response_model=OkResponse)
def admin_logout(
    request: Request,
    response: Response,
    manager: SessionManager = Depends(get_session_manager),
) -> OkResponse:
    manager.destroy_session(request, response)
    return OkResponse()


@api_router.get(
    "/auth/session",
    response_model=AdminSessionStatusResponse,
    response_model_exclude_unset=True,
)
def admin_session(
    session: AdminSession | None = Depends(get_optional_admin_session),
) -> AdminSessionStatusResponse:
    if session is None:
        return AdminSessionStatusResponse(admin=None)
    return AdminSessionStatusResponse(
        admin=AdminPrincipal(login_id=session.login_id),
        expires_at=session.expires_at,
    )


@api_router.get("/requests", response_model=FeatureRequestListResponse)
def list_requests(
    status_filter: str | None = Query(default=None, alias="status"),
    _: AdminSession = Depends(require_admin_session),
) -> FeatureRequestListResponse:
    return FeatureRequestListResponse(requests=feature_request_store.list_requests(status_filter))


@api_router.patch("/requests", response_model=FeatureRequestUpdatedResponse)
def update_request(
    payload: FeatureRequestStatusUpdate,
    _: AdminSession = Depends(require_admin_session),
) -> FeatureRequestUpdatedResponse:
    updated = feature_request_store.update_status(payload.id, payload.status)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
    return FeatureRequestUpdatedResponse(request=updated)


@api_router.get("/users", response_model=list[AdminUserSummary])
def list_users(_: AdminSession = Depends(require_admin_session)) -> list[AdminUserSummary]:
    return user_store.list_users()


@api_router.get("/documents", response_model=AdminDocumentListResponse)
def list_documents(_: AdminSession = Depends(require_admin_session)) -> AdminDocumentListResponse:
    return AdminDocumentListResponse(documents=document_store.list_all_documents())


LOGIN_PAGE = """<!doctype html>
<html lang="ja">
<head><meta charset="utf-8"><title>Tategaki Admin</title></head>
<body>
<h1>Tategaki Admin</h1>
<form id="login">
<label>Login ID <input name="loginId" autocomplete="username" required></label>
<label>Password <input name="password" type="password" autocomplete="current-password" required></label>
<button type="submit">Log in</button>
</form>
<script>
document.getElementById("login").addEventListener("submit", async (event) => {
  event.preventDefault();
  const form = new FormData(event.target);
  const res = await fetch("/api/auth/login", {
    method: "POST",
    headers: {"Content-Type": "application/json"},
    body: JSON.stringify({loginId: form.get("loginId"), password: form.get("password")}),
  });
  if (res.ok) window.location.assign("/");
});
</script>
</body>
</html>
"""


@page_router.get("/login", response_class=HTMLResponse)
def login_page() -> str:
    return LOGIN_PAGE


@page_router.get("/", response_class=HTMLResponse)
def dashboard(session: AdminSession = Depends(require_admin_page)) -> str:
    request_counts = feature_request_store.count_by_status()
    rows = [
        ("New requests", request_counts.get("new", 0)),
        ("Reviewed requests", request_counts.get("reviewed", 0)),
        ("Users", user_store.count_users()),
        ("Documents", document_store.count_documents()),
    ]
    items = "\n".join(f"<li>{label}: {total}</li>" for label, total in rows)
    return (
        '<!doctype html>\n<html lang="ja">\n<head><meta charset="utf-8">'
        "<title>Tategaki Admin</title></head>\n<body>\n"
        f"<p>Signed in as {html.escape(session.login_id)}</p>\n<ul>\n{items}\n</ul>\n"
        "</body>\n</html>\n"
    )
