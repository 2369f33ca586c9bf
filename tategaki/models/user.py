import uuid

from sqlalchemy import BigInteger, Column, String

from tategaki.clock import now_ms
from tategaki.database import Base


class UserEntry(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True, index=True)
    display_name = Column(String(80), nullable=True)
    password_hash = Column(String(255), nullable=False, default="")
    created_at = Column(BigInteger, nullable=False, default=now_ms)
