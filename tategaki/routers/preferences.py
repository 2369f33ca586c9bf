from fastapi import APIRouter, Depends

from tategaki.dependencies import SessionUser, require_user_session
from tategaki.schemas.preferences import Preferences, PreferencesUpdate
from tategaki.services.preferences import preference_store

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=Preferences)
def get_preferences(session: SessionUser = Depends(require_user_session)) -> Preferences:
    return preference_store.get_preferences(session.user.id)


@router.put("", response_model=Preferences)
def update_preferences(
    payload: PreferencesUpdate, session: SessionUser = Depends(require_user_session)
) -> Preferences:
    return preference_store.update_preferences(session.user.id, payload)
