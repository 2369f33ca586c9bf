import json
import logging
from typing import Any

from sqlalchemy import delete, func, select

from tategaki.clock import now_ms
from tategaki.database import session_scope
from tategaki.models.document import DocumentEntry, DocumentRevisionEntry
from tategaki.models.user import UserEntry
from tategaki.schemas.documents import (
    AdminDocumentSummary,
    DocumentDetail,
    DocumentSaveRequest,
    DocumentSummary,
    RevisionRecord,
)

LOGGER = logging.getLogger(__name__)


def _pages_json(payload: DocumentSaveRequest) -> str | None:
    if payload.pages is None:
        return None
    return json.dumps([page.model_dump() for page in payload.pages], ensure_ascii=False)


def _parse_pages(document_id: str, raw: str | None) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        LOGGER.warning("stored pages are not valid JSON document_id=%s", document_id)
        return None


def _summary(entry: DocumentEntry) -> DocumentSummary:
    return DocumentSummary(
        id=entry.id,
        title=entry.title,
        updated_at=entry.updated_at,
        created_at=entry.created_at,
    )


class DocumentStore:
    def list_documents(self, user_id: str) -> list[DocumentSummary]:
        with session_scope() as session:
            entries = session.execute(
                select(DocumentEntry)
                .where(DocumentEntry.user_id == user_id)
                .order_by(DocumentEntry.updated_at.desc())
            ).scalars().all()
            return [_summary(entry) for entry in entries]

    def save_document(self, user_id: str, payload: DocumentSaveRequest) -> DocumentSummary | None:
        """Insert or update a document; ``None`` when the id is not the user's."""
        now = now_ms()
        pages_json = _pages_json(payload)
        with session_scope() as session:
            if payload.document_id:
                entry = session.execute(
                    select(DocumentEntry).where(
                        DocumentEntry.id == payload.document_id,
                        DocumentEntry.user_id == user_id,
                    )
                ).scalar_one_or_none()
                if entry is None:
                    return None
                entry.title = payload.title
                entry.content = payload.content
                entry.pages_json = pages_json
                entry.updated_at = now
            else:
                entry = DocumentEntry(
                    user_id=user_id,
                    title=payload.title,
                    content=payload.content,
                    pages_json=pages_json,
                    updated_at=now,
                    created_at=now,
                )
                session.add(entry)
            session.flush()

            if payload.create_revision is not False:
                session.add(
                    DocumentRevisionEntry(
                        document_id=entry.id,
                        user_id=user_id,
                        title=payload.title,
                        content=payload.content,
                        pages_json=pages_json,
                        created_at=now,
                    )
                )
            return _summary(entry)

    def get_document(self, user_id: str, document_id: str) -> DocumentDetail | None:
        with session_scope() as session:
            entry = session.execute(
                select(DocumentEntry).where(
                    DocumentEntry.id == document_id,
                    DocumentEntry.user_id == user_id,
                )
            ).scalar_one_or_none()
            if entry is None:
                return None
            return DocumentDetail(
                id=entry.id,
                title=entry.title,
                content=entry.content,
                pages=_parse_pages(entry.id, entry.pages_json),
                updated_at=entry.updated_at,
            )

    def delete_document(self, user_id: str, document_id: str) -> bool:
        with session_scope() as session:
            owned = session.execute(
                select(DocumentEntry.id).where(
                    DocumentEntry.id == document_id,
                    DocumentEntry.user_id == user_id,
                )
            ).scalar_one_or_none()
            if owned is None:
                return False
            session.execute(
                delete(DocumentRevisionEntry).where(
                    DocumentRevisionEntry.document_id == document_id
                )
            )
            session.execute(delete(DocumentEntry).where(DocumentEntry.id == document_id))
            return True

    def list_revisions(self, user_id: str, document_id: str) -> list[RevisionRecord] | None:
        with session_scope() as session:
            owned = session.execute(
                select(DocumentEntry.id).where(
                    DocumentEntry.id == document_id,
                    DocumentEntry.user_id == user_id,
                )
            ).scalar_one_or_none()
            if owned is None:
                return None
            entries = session.execute(
                select(DocumentRevisionEntry)
                .where(DocumentRevisionEntry.document_id == document_id)
                .order_by(DocumentRevisionEntry.created_at.asc())
            ).scalars().all()
            return [
                RevisionRecord(
                    id=entry.id,
                    title=entry.title,
                    content=entry.content,
                    pages=_parse_pages(entry.document_id, entry.pages_json),
                    created_at=entry.created_at,
                )
                for entry in entries
            ]

    def list_all_documents(self) -> list[AdminDocumentSummary]:
        with session_scope() as session:
            rows = session.execute(
                select(DocumentEntry, UserEntry.email)
                .outerjoin(UserEntry, UserEntry.id == DocumentEntry.user_id)
                .order_by(DocumentEntry.updated_at.desc())
            ).all()
            return [
                AdminDocumentSummary(
                    id=entry.id,
                    title=entry.title,
                    updated_at=entry.updated_at,
                    created_at=entry.created_at,
                    user_id=entry.user_id,
                    owner_email=email,
                )
                for entry, email in rows
            ]

    def count_documents(self) -> int:
        with session_scope() as session:
            return session.execute(select(func.count(DocumentEntry.id))).scalar_one()


document_store = DocumentStore()
