from fastapi import APIRouter, Depends, status

from tategaki.dependencies import SessionUser, get_optional_user_session
from tategaki.schemas.feature_requests import (
    FeatureRequestCreate,
    FeatureRequestCreatedResponse,
)
from tategaki.services.feature_requests import feature_request_store

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post(
    "",
    response_model=FeatureRequestCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_request(
    payload: FeatureRequestCreate,
    session: SessionUser | None = Depends(get_optional_user_session),
) -> FeatureRequestCreatedResponse:
    created = feature_request_store.submit(
        payload,
        user_id=session.user.id if session else None,
        fallback_name=session.user.display_name if session else None,
    )
    return FeatureRequestCreatedResponse(request=created)
