import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from tategaki.config import Settings, settings as default_settings
from tategaki.database import init_db
from tategaki.errors import ConfigurationError, LoginRedirect
from tategaki.logging_config import setup_logging
from tategaki.routers import admin, auth, documents, feature_requests, health, preferences
from tategaki.services.credentials import AdminCredentialValidator, UserCredentialValidator
from tategaki.services.sessions import (
    DatabaseSessionStore,
    SessionManager,
    SessionStoreBackend,
    SignedCookieSessionStore,
)
from tategaki.services.tokens import TokenCodec
from tategaki.services.users import user_store

LOGGER = logging.getLogger(__name__)


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(location), "message": error.get("msg", "")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request", "errors": _validation_errors(exc)},
        )

    @app.exception_handler(LoginRedirect)
    async def handle_login_redirect(request: Request, exc: LoginRedirect):
        return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        LOGGER.error("configuration error path=%s error=%s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        LOGGER.exception("unhandled error path=%s method=%s", request.url.path, request.method)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def _base_app(title: str, config: Settings) -> FastAPI:
    setup_logging(config.log_level)
    app = FastAPI(title=title)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    if config.create_tables:

        @app.on_event("startup")
        def startup() -> None:
            init_db()

    return app


def build_user_session_store(config: Settings) -> SessionStoreBackend:
    if config.session_backend == "database":
        return DatabaseSessionStore(config.user_session_ttl_seconds)
    if config.session_backend == "signed":
        return SignedCookieSessionStore(
            TokenCodec(config.session_secret), config.user_session_ttl_seconds
        )
    raise ConfigurationError(f"Unknown SESSION_BACKEND {config.session_backend!r}")


def create_app(config: Settings = default_settings) -> FastAPI:
    """Editor API: end-user accounts, cloud documents and preferences."""
    app = _base_app("Tategaki Editor API", config)
    app.state.settings = config
    app.state.session_manager = SessionManager(
        build_user_session_store(config),
        cookie_name=config.session_cookie_name,
        secure=config.production,
    )
    app.state.credential_validator = UserCredentialValidator(
        user_store, rounds=config.bcrypt_rounds
    )

    app.include_router(health.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(documents.router, prefix="/api")
    app.include_router(preferences.router, prefix="/api")
    app.include_router(feature_requests.router, prefix="/api")
    return app


def create_admin_app(config: Settings = default_settings) -> FastAPI:
    """Admin console API and pages. Refuses to start without a signing secret."""
    codec = TokenCodec(config.admin_session_secret)
    app = _base_app("Tategaki Admin", config)
    app.state.settings = config
    app.state.session_manager = SessionManager(
        SignedCookieSessionStore(codec, config.admin_session_ttl_seconds),
        cookie_name=config.admin_cookie_name,
        secure=config.production,
    )
    app.state.credential_validator = AdminCredentialValidator(
        config.admin_login_id, config.admin_login_password
    )

    app.include_router(health.router, prefix="/api")
    app.include_router(admin.api_router, prefix="/api")
    app.include_router(admin.page_router)
    return app

