from typing import Literal, Optional

from pydantic import Field

from tategaki.schemas.base import ApiModel


class Preferences(ApiModel):
    theme: Literal["light", "dark", "custom"] = "light"
    background_color: str = "#FFFFFF"
    text_color: str = "#000000"
    font_preset: Literal["classic", "modern", "neutral", "mono"] = "classic"
    max_lines_per_page: int = Field(default=40, ge=1, le=100)
    editor_mode: Literal["paged", "continuous"] = "paged"
    auto_save: bool = True
    revision_interval_minutes: int = Field(default=10, ge=1, le=60)
    keybindings: dict[str, str] = Field(default_factory=dict)


class PreferencesUpdate(ApiModel):
    theme: Optional[Literal["light", "dark", "custom"]] = None
    background_color: Optional[str] = Field(default=None, max_length=32)
    text_color: Optional[str] = Field(default=None, max_length=32)
    font_preset: Optional[Literal["classic", "modern", "neutral", "mono"]] = None
    max_lines_per_page: Optional[int] = Field(default=None, ge=1, le=100)
    editor_mode: Optional[Literal["paged", "continuous"]] = None
    auto_save: Optional[bool] = None
    revision_interval_minutes: Optional[int] = Field(default=None, ge=1, le=60)
    keybindings: Optional[dict[str, str]] = None
