"""Session creation, resolution and destruction.

Two interchangeable stores sit behind :class:`SessionManager`:

* :class:`SignedCookieSessionStore` keeps nothing server side. The cookie is a
  signed token and stays cryptographically valid until it expires, even after
  logout; logging out only deletes the browser's copy.
* :class:`DatabaseSessionStore` keeps one ``sessions`` row per login. The
  cookie is the row id and logout deletes the row, so a destroyed session can
  never be presented again.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Protocol

from fastapi import Request, Response
from sqlalchemy import delete, select

from tategaki.clock import from_ms, now_ms
from tategaki.database import session_scope
from tategaki.errors import TokenError
from tategaki.models.session import SessionEntry
from tategaki.models.user import UserEntry
from tategaki.services.tokens import SessionPayload, TokenCodec

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRecord:
    token: str
    subject_id: str
    expires_at: int


class SessionStoreBackend(Protocol):
    def create(self, subject_id: str) -> SessionRecord: ...

    def resolve(self, token: str) -> SessionRecord | None: ...

    def destroy(self, token: str) -> None: ...


class SignedCookieSessionStore:
    def __init__(self, codec: TokenCodec, ttl_seconds: int) -> None:
        self._codec = codec
        self._ttl_ms = ttl_seconds * 1000

    def create(self, subject_id: str) -> SessionRecord:
        expires_at = now_ms() + self._ttl_ms
        token = self._codec.encode(SessionPayload(subject_id=subject_id, expires_at=expires_at))
        return SessionRecord(token=token, subject_id=subject_id, expires_at=expires_at)

    def resolve(self, token: str) -> SessionRecord | None:
        try:
            payload = self._codec.decode(token)
        except TokenError:
            return None
        return SessionRecord(
            token=token, subject_id=payload.subject_id, expires_at=payload.expires_at
        )

    def destroy(self, token: str) -> None:
        # No revocation list: the token simply stops being sent by the browser.
        return None


class DatabaseSessionStore:
    def __init__(self, ttl_seconds: int) -> None:
        self._ttl_ms = ttl_seconds * 1000

    def create(self, subject_id: str) -> SessionRecord:
        now = now_ms()
        entry = SessionEntry(
            id=str(uuid.uuid4()),
            user_id=subject_id,
            expires_at=now + self._ttl_ms,
            created_at=now,
        )
        with session_scope() as session:
            session.execute(delete(SessionEntry).where(SessionEntry.expires_at <= now))
            session.add(entry)
        return SessionRecord(token=entry.id, subject_id=subject_id, expires_at=entry.expires_at)

    def resolve(self, token: str) -> SessionRecord | None:
        if not token:
            return None
        with session_scope() as session:
            row = session.execute(
                select(SessionEntry.id, SessionEntry.user_id, SessionEntry.expires_at)
                .join(UserEntry, UserEntry.id == SessionEntry.user_id)
                .where(SessionEntry.id == token)
                .limit(1)
            ).first()
            if row is None:
                return None
            if row.expires_at <= now_ms():
                session.execute(delete(SessionEntry).where(SessionEntry.id == token))
                return None
            return SessionRecord(token=row.id, subject_id=row.user_id, expires_at=row.expires_at)

    def destroy(self, token: str) -> None:
        if not token:
            return
        with session_scope() as session:
            session.execute(delete(SessionEntry).where(SessionEntry.id == token))


class SessionManager:
    def __init__(self, store: SessionStoreBackend, cookie_name: str, secure: bool) -> None:
        self.store = store
        self.cookie_name = cookie_name
        self._secure = secure

    def create_session(self, response: Response, subject_id: str) -> SessionRecord:
        record = self.store.create(subject_id)
        response.set_cookie(
            key=self.cookie_name,
            value=record.token,
            expires=from_ms(record.expires_at),
            path="/",
            secure=self._secure,
            httponly=True,
            samesite="lax",
        )
        return record

    def get_session(self, request: Request, response: Response | None = None) -> SessionRecord | None:
        token = request.cookies.get(self.cookie_name)
        if not token:
            return None
        record = self.store.resolve(token)
        if record is None:
            LOGGER.debug("discarding unresolvable session cookie name=%s", self.cookie_name)
            if response is not None:
                self.clear_cookie(response)
        return record

    def destroy_session(self, request: Request, response: Response) -> None:
        self.clear_cookie(response)
        token = request.cookies.get(self.cookie_name)
        if token:
            self.store.destroy(token)

    def clear_cookie(self, response: Response) -> None:
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            secure=self._secure,
            httponly=True,
            samesite="lax",
        )

    def cleared_cookie_header(self) -> str:
        """``Set-Cookie`` value that deletes the session cookie, for error responses."""
        response = Response()
        self.clear_cookie(response)
        return response.headers["set-cookie"]
