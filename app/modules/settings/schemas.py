"""Payload schemas for settings actions."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class SaveSettingsPayload(BaseModel):
    """Partial update of the admin styler options.

    Only the fields present in the request are saved; unknown keys are
    rejected.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    menu_background_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    menu_text_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    menu_hover_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    menu_active_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    menu_font_size: Optional[int] = Field(None, ge=8, le=32)
    menu_font_family: Optional[str] = Field(None, max_length=100)

    adminbar_background: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    adminbar_text_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    adminbar_hover_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    adminbar_height: Optional[int] = Field(None, ge=20, le=100)

    content_background: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    content_text_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    content_link_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)

    enable_live_preview: Optional[bool] = None
    enable_custom_css: Optional[bool] = None
    enable_responsive_design: Optional[bool] = None
    animation_speed: Optional[Literal["slow", "normal", "fast"]] = None
    cache_css: Optional[bool] = None
    minify_css: Optional[bool] = None
    custom_css: Optional[str] = Field(None, max_length=50000)
    admin_menu_detached: Optional[bool] = None
    admin_bar_detached: Optional[bool] = None

    @field_validator("custom_css")
    @classmethod
    def reject_markup(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and "</style" in value.lower():
            raise ValueError("custom_css must not close the style element")
        return value


class GetSettingsPayload(BaseModel):
    """Optional subset of option keys to read."""

    model_config = ConfigDict(extra="forbid")

    keys: Optional[List[str]] = Field(None, max_length=100)

    @field_validator("keys")
    @classmethod
    def validate_keys(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return value
        for key in value:
            if not key or not key.replace("_", "").isalnum() or key != key.lower():
                raise ValueError(f"Invalid setting key: {key!r}")
        return value
