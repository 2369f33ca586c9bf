from sqlalchemy import BigInteger, Column, ForeignKey, String

from tategaki.clock import now_ms
from tategaki.database import Base


class SessionEntry(Base):
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(BigInteger, nullable=False)
    created_at = Column(BigInteger, nullable=False, default=now_ms)
