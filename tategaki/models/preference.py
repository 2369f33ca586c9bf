import uuid

from sqlalchemy import BigInteger, Column, ForeignKey, String, Text

from tategaki.clock import now_ms
from tategaki.database import Base


class PreferenceEntry(Base):
    __tablename__ = "user_preferences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    preferences = Column(Text, nullable=True)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)
    created_at = Column(BigInteger, nullable=False, default=now_ms)
