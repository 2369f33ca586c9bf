from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from tategaki.schemas.auth import normalize_email
from tategaki.schemas.base import ApiModel

RequestStatus = Literal["new", "reviewed"]


class FeatureRequestCreate(ApiModel):
    email: EmailStr
    name: Optional[str] = Field(default=None, max_length=80)
    message: str = Field(min_length=10, max_length=5000)

    @field_validator("email", mode="before")
    @classmethod
    def clean_email(cls, value: object) -> object:
        return normalize_email(value)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("message")
    @classmethod
    def normalize_message(cls, value: str) -> str:
        cleaned = value.strip()
        if len(cleaned) < 10:
            raise ValueError("Message must be at least 10 characters")
        return cleaned


class FeatureRequestCreated(ApiModel):
    id: str
    created_at: int


class FeatureRequestCreatedResponse(ApiModel):
    ok: bool = True
    request: FeatureRequestCreated


class FeatureRequestRecord(ApiModel):
    id: str
    user_id: Optional[str] = None
    email: str
    name: Optional[str] = None
    message: str
    status: str
    created_at: int


class FeatureRequestListResponse(ApiModel):
    requests: list[FeatureRequestRecord]


class FeatureRequestStatusUpdate(ApiModel):
    id: str = Field(min_length=1)
    status: RequestStatus


class FeatureRequestUpdatedResponse(ApiModel):
    ok: bool = True
    request: FeatureRequestRecord
