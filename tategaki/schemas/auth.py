from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from tategaki.schemas.base import ApiModel
from tategaki.schemas.users import UserSummary


def normalize_email(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class UserLoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=80)
    mode: Literal["login", "signup"] = "login"

    @field_validator("email", mode="before")
    @classmethod
    def clean_email(cls, value: object) -> object:
        return normalize_email(value)


class UserSessionResponse(ApiModel):
    user: UserSummary
    expires_at: int


class SessionStatusResponse(ApiModel):
    user: Optional[UserSummary] = None
    expires_at: Optional[int] = None


class LogoutResponse(ApiModel):
    success: bool = True


class AdminLoginRequest(ApiModel):
    login_id: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)


class AdminPrincipal(ApiModel):
    login_id: str


class AdminSessionStatusResponse(ApiModel):
    admin: Optional[AdminPrincipal] = None
    expires_at: Optional[int] = None


class OkResponse(ApiModel):
    ok: bool = True
