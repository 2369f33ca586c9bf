from typing import Optional

from tategaki.schemas.base import ApiModel


class UserSummary(ApiModel):
    id: str
    email: str
    display_name: Optional[str] = None


class AdminUserSummary(UserSummary):
    has_password: bool
    document_count: int
    created_at: int
