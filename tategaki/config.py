import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv(override=True)

DAY_SECONDS = 86400


def _env_bool(name: str, default: bool = False) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_list(name: str, default: str = "") -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def _is_production() -> bool:
    environment = os.getenv("APP_ENV") or os.getenv("NODE_ENV", "development")
    return environment.strip().lower() == "production"


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./tategaki.db")
    production: bool = _is_production()
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    cors_allow_origins: list[str] = field(
        default_factory=lambda: _env_list(
            "CORS_ALLOW_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
        )
    )
    # End-user sessions (editor app).
    session_backend: str = os.getenv("SESSION_BACKEND", "database").strip().lower()
    session_secret: str = os.getenv("SESSION_SECRET", "")
    session_cookie_name: str = "tategaki_session"
    user_session_ttl_seconds: int = int(
        os.getenv("USER_SESSION_TTL_SECONDS", str(30 * DAY_SECONDS))
    )
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    # Admin console.
    admin_session_secret: str = os.getenv("ADMIN_SESSION_SECRET", "")
    admin_login_id: str = os.getenv("ADMIN_LOGIN_ID", "")
    admin_login_password: str = os.getenv("ADMIN_LOGIN_PASSWORD", "")
    admin_cookie_name: str = "tategaki_admin_session"
    admin_session_ttl_seconds: int = int(
        os.getenv("ADMIN_SESSION_TTL_SECONDS", str(7 * DAY_SECONDS))
    )
    create_tables: bool = _env_bool("CREATE_TABLES", True)


settings = Settings()
