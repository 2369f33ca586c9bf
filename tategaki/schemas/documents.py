from typing import Any, Optional

from pydantic import Field, field_validator

from tategaki.schemas.base import ApiModel


class PageContent(ApiModel):
    id: str
    content: str


class DocumentSaveRequest(ApiModel):
    document_id: Optional[str] = Field(default=None, min_length=1, max_length=36)
    title: str = Field(min_length=1, max_length=120)
    content: str
    pages: Optional[list[PageContent]] = None
    create_revision: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def normalize_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("This field is required")
        return cleaned


class DocumentSummary(ApiModel):
    id: str
    title: str
    updated_at: int
    created_at: Optional[int] = None


class DocumentDetail(ApiModel):
    id: str
    title: str
    content: str
    pages: Optional[Any] = None
    updated_at: int


class DocumentListResponse(ApiModel):
    documents: list[DocumentSummary]


class DocumentSavedResponse(ApiModel):
    document: DocumentSummary


class DocumentDetailResponse(ApiModel):
    document: DocumentDetail


class RevisionRecord(ApiModel):
    id: str
    title: str
    content: str
    pages: Optional[Any] = None
    created_at: int


class RevisionListResponse(ApiModel):
    revisions: list[RevisionRecord]


class AdminDocumentSummary(DocumentSummary):
    user_id: str
    owner_email: Optional[str] = None


class AdminDocumentListResponse(ApiModel):
    documents: list[AdminDocumentSummary]
