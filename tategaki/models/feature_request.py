import uuid

from sqlalchemy import BigInteger, Column, Index, String, Text

from tategaki.clock import now_ms
from tategaki.database import Base


class FeatureRequestEntry(Base):
    __tablename__ = "feature_requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=True)
    email = Column(String(255), nullable=False)
    name = Column(String(80), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default="new")
    created_at = Column(BigInteger, nullable=False, default=now_ms)

    __table_args__ = (Index("ix_feature_requests_status", "status"),)
