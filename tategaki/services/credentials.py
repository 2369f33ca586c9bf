import hmac
import logging

from sqlalchemy.exc import IntegrityError

from tategaki.errors import (
    ConfigurationError,
    EmailConflictError,
    InvalidCredentialsError,
)
from tategaki.models.user import UserEntry
from tategaki.services.passwords import DEFAULT_ROUNDS, hash_password, verify_password
from tategaki.services.users import UserStore

LOGGER = logging.getLogger(__name__)


def _same(left: str, right: str) -> bool:
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))


class AdminCredentialValidator:
    """Single-account check against the configured admin login id and password."""

    def __init__(self, login_id: str, password: str) -> None:
        self._login_id = login_id
        self._password = password

    def validate(self, login_id: str, password: str) -> bool:
        if not self._login_id or not self._password:
            raise ConfigurationError("ADMIN_LOGIN_ID or ADMIN_LOGIN_PASSWORD is not configured")
        # Evaluate both comparisons so timing does not reveal which one failed.
        id_matches = _same(login_id, self._login_id)
        password_matches = _same(password, self._password)
        return id_matches and password_matches


class UserCredentialValidator:
    def __init__(self, users: UserStore, rounds: int = DEFAULT_ROUNDS) -> None:
        self._users = users
        self._rounds = rounds

    def validate(self, email: str, password: str) -> UserEntry:
        entry = self._users.get_by_email(email)
        if entry is None or not entry.password_hash:
            raise InvalidCredentialsError("Invalid email or password")
        if not verify_password(password, entry.password_hash):
            raise InvalidCredentialsError("Invalid email or password")
        return entry

    def login(self, email: str, password: str, display_name: str | None = None) -> UserEntry:
        entry = self.validate(email, password)
        if display_name and display_name != entry.display_name:
            entry = self._users.update_display_name(entry.id, display_name)
        return entry

    def signup(self, email: str, password: str, display_name: str | None = None) -> UserEntry:
        existing = self._users.get_by_email(email)
        if existing is not None and existing.password_hash:
            raise EmailConflictError("Email already registered")
        password_hash = hash_password(password, rounds=self._rounds)
        try:
            entry = self._users.create_or_set_password(email, password_hash, display_name)
        except IntegrityError as exc:
            raise EmailConflictError("Email already registered") from exc
        LOGGER.info("user signed up user_id=%s upgraded=%s", entry.id, existing is not None)
        return entry
