import uuid

from sqlalchemy import BigInteger, Column, ForeignKey, String, Text

from tategaki.clock import now_ms
from tategaki.database import Base


class DocumentEntry(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(120), nullable=False)
    content = Column(Text, nullable=False)
    pages_json = Column(Text, nullable=True)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)
    created_at = Column(BigInteger, nullable=False, default=now_ms)


class DocumentRevisionEntry(Base):
    __tablename__ = "document_revisions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    document_id = Column(
        String(36),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(120), nullable=False)
    content = Column(Text, nullable=False)
    pages_json = Column(Text, nullable=True)
    created_at = Column(BigInteger, nullable=False, default=now_ms)
