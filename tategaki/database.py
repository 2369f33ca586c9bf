from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from tategaki.config import settings


def _build_database_url(raw_url: str) -> str:
    if raw_url.startswith("postgresql://"):
        return raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return raw_url


def _connect_args(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def build_engine(raw_url: str) -> Engine:
    url = _build_database_url(raw_url)
    if not url:
        raise RuntimeError("DATABASE_URL is not configured")
    return create_engine(url, pool_pre_ping=True, connect_args=_connect_args(url))


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(
    bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
)
Base = declarative_base()


def bind_engine(new_engine: Engine) -> None:
    """Point the session factory at another engine (used by tests and scripts)."""
    global engine
    engine = new_engine
    SessionLocal.configure(bind=new_engine)


def init_db() -> None:
    from tategaki.models import document as _document  # noqa: F401
    from tategaki.models import feature_request as _feature_request  # noqa: F401
    from tategaki.models import preference as _preference  # noqa: F401
    from tategaki.models import session as _session  # noqa: F401
    from tategaki.models import user as _user  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope():
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
