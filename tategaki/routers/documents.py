from fastapi import APIRouter, Depends, HTTPException, status

from tategaki.dependencies import SessionUser, require_user_session
from tategaki.schemas.auth import OkResponse
from tategaki.schemas.documents import (
    DocumentDetailResponse,
    DocumentListResponse,
    DocumentSaveRequest,
    DocumentSavedResponse,
    RevisionListResponse,
)
from tategaki.services.documents import document_store

router = APIRouter(prefix="/cloud/documents", tags=["documents"])

NOT_FOUND_DETAIL = "Document not found"


@router.get("", response_model=DocumentListResponse)
def list_documents(session: SessionUser = Depends(require_user_session)) -> DocumentListResponse:
    return DocumentListResponse(documents=document_store.list_documents(session.user.id))


@router.post("", response_model=DocumentSavedResponse)
def save_document(
    payload: DocumentSaveRequest, session: SessionUser = Depends(require_user_session)
) -> DocumentSavedResponse:
    saved = document_store.save_document(session.user.id, payload)
    if saved is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)
    return DocumentSavedResponse(document=saved)


@router.get("/{document_id}", response_model=DocumentDetailResponse)
def get_document(
    document_id: str, session: SessionUser = Depends(require_user_session)
) -> DocumentDetailResponse:
    document = document_store.get_document(session.user.id, document_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)
    return DocumentDetailResponse(document=document)


@router.delete("/{document_id}", response_model=OkResponse)
def delete_document(
    document_id: str, session: SessionUser = Depends(require_user_session)
) -> OkResponse:
    if not document_store.delete_document(session.user.id, document_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)
    return OkResponse()


@router.get("/{document_id}/revisions", response_model=RevisionListResponse)
def list_revisions(
    document_id: str, session: SessionUser = Depends(require_user_session)
) -> RevisionListResponse:
    revisions = document_store.list_revisions(session.user.id, document_id)
    if revisions is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)
    return RevisionListResponse(revisions=revisions)
