from sqlalchemy import func, select

from tategaki.database import session_scope
from tategaki.models.feature_request import FeatureRequestEntry
from tategaki.schemas.feature_requests import (
    FeatureRequestCreate,
    FeatureRequestCreated,
    FeatureRequestRecord,
)

STATUSES = ("new", "reviewed")


def _to_record(entry: FeatureRequestEntry) -> FeatureRequestRecord:
    return FeatureRequestRecord(
        id=entry.id,
        user_id=entry.user_id,
        email=entry.email,
        name=entry.name,
        message=entry.message,
        status=entry.status,
        created_at=entry.created_at,
    )


class FeatureRequestStore:
    def submit(
        self,
        payload: FeatureRequestCreate,
        user_id: str | None = None,
        fallback_name: str | None = None,
    ) -> FeatureRequestCreated:
        entry = FeatureRequestEntry(
            user_id=user_id,
            email=payload.email,
            name=payload.name or fallback_name,
            message=payload.message,
            status="new",
        )
        with session_scope() as session:
            session.add(entry)
            session.flush()
            return FeatureRequestCreated(id=entry.id, created_at=entry.created_at)

    def list_requests(self, status: str | None = None) -> list[FeatureRequestRecord]:
        stmt = select(FeatureRequestEntry)
        if status in STATUSES:
            stmt = stmt.where(FeatureRequestEntry.status == status)
        with session_scope() as session:
            entries = session.execute(
                stmt.order_by(FeatureRequestEntry.created_at.desc())
            ).scalars().all()
            return [_to_record(entry) for entry in entries]

    def update_status(self, request_id: str, status: str) -> FeatureRequestRecord | None:
        with session_scope() as session:
            entry = session.get(FeatureRequestEntry, request_id)
            if entry is None:
                return None
            entry.status = status
            session.flush()
            return _to_record(entry)

    def count_by_status(self) -> dict[str, int]:
        counts = {status: 0 for status in STATUSES}
        with session_scope() as session:
            rows = session.execute(
                select(FeatureRequestEntry.status, func.count(FeatureRequestEntry.id))
                .group_by(FeatureRequestEntry.status)
            ).all()
        for status, total in rows:
            counts[status] = int(total)
        return counts


feature_request_store = FeatureRequestStore()
