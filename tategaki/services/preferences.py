import json
import logging

from pydantic import ValidationError
from sqlalchemy import select

from tategaki.clock import now_ms
from tategaki.database import session_scope
from tategaki.models.preference import PreferenceEntry
from tategaki.schemas.preferences import Preferences, PreferencesUpdate

LOGGER = logging.getLogger(__name__)


def _merge(raw: str | None) -> Preferences:
    merged = Preferences().model_dump(by_alias=True)
    if not raw:
        return Preferences.model_validate(merged)
    try:
        stored = json.loads(raw)
        if isinstance(stored, dict):
            merged.update(stored)
        return Preferences.model_validate(merged)
    except (ValueError, ValidationError):
        LOGGER.warning("discarding unreadable stored preferences")
        return Preferences()


class PreferenceStore:
    def get_preferences(self, user_id: str) -> Preferences:
        with session_scope() as session:
            entry = session.execute(
                select(PreferenceEntry).where(PreferenceEntry.user_id == user_id)
            ).scalar_one_or_none()
            return _merge(entry.preferences if entry else None)

    def update_preferences(self, user_id: str, payload: PreferencesUpdate) -> Preferences:
        now = now_ms()
        with session_scope() as session:
            entry = session.execute(
                select(PreferenceEntry).where(PreferenceEntry.user_id == user_id)
            ).scalar_one_or_none()
            current = _merge(entry.preferences if entry else None).model_dump(by_alias=True)
            current.update(payload.model_dump(by_alias=True, exclude_none=True))
            updated = Preferences.model_validate(current)
            serialized = json.dumps(updated.model_dump(by_alias=True), ensure_ascii=False)
            if entry is None:
                session.add(
                    PreferenceEntry(
                        user_id=user_id,
                        preferences=serialized,
                        updated_at=now,
                        created_at=now,
                    )
                )
            else:
                entry.preferences = serialized
                entry.updated_at = now
            return updated


preference_store = PreferenceStore()
