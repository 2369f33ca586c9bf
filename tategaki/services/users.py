from sqlalchemy import func, select

from tategaki.database import session_scope
from tategaki.models.document import DocumentEntry
from tategaki.models.user import UserEntry
from tategaki.schemas.users import AdminUserSummary, UserSummary


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    def get_by_email(self, email: str) -> UserEntry | None:
        with session_scope() as session:
            return session.execute(
                select(UserEntry).where(UserEntry.email == _normalize_email(email))
            ).scalar_one_or_none()

    def get_user(self, user_id: str) -> UserEntry | None:
        with session_scope() as session:
            return session.get(UserEntry, user_id)

    def create_or_set_password(
        self, email: str, password_hash: str, display_name: str | None
    ) -> UserEntry:
        key = _normalize_email(email)
        with session_scope() as session:
            entry = session.execute(
                select(UserEntry).where(UserEntry.email == key)
            ).scalar_one_or_none()
            if entry is None:
                entry = UserEntry(
                    email=key,
                    display_name=display_name,
                    password_hash=password_hash,
                )
                session.add(entry)
            else:
                entry.password_hash = password_hash
                entry.display_name = display_name or entry.display_name
            session.flush()
            return entry

    def update_display_name(self, user_id: str, display_name: str) -> UserEntry:
        with session_scope() as session:
            entry = session.get(UserEntry, user_id)
            if entry is None:
                raise ValueError("User not found")
            entry.display_name = display_name
            session.flush()
            return entry

    def list_users(self) -> list[AdminUserSummary]:
        document_counts = (
            select(DocumentEntry.user_id, func.count(DocumentEntry.id).label("total"))
            .group_by(DocumentEntry.user_id)
            .subquery()
        )
        with session_scope() as session:
            rows = session.execute(
                select(UserEntry, func.coalesce(document_counts.c.total, 0))
                .outerjoin(document_counts, document_counts.c.user_id == UserEntry.id)
                .order_by(UserEntry.created_at.desc())
            ).all()
            return [
                AdminUserSummary(
                    id=entry.id,
                    email=entry.email,
                    display_name=entry.display_name,
                    has_password=bool(entry.password_hash),
                    document_count=int(total),
                    created_at=entry.created_at,
                )
                for entry, total in rows
            ]

    def count_users(self) -> int:
        with session_scope() as session:
            return session.execute(select(func.count(UserEntry.id))).scalar_one()

    @staticmethod
    def to_summary(entry: UserEntry) -> UserSummary:
        return UserSummary(id=entry.id, email=entry.email, display_name=entry.display_name)


user_store = UserStore()
