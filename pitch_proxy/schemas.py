from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def lenient_text(value: Any) -> str | None:
    """
    Coerce a JSON scalar to text the way the panel's string templates would.

    - str passes through
    - numbers -> str(value), booleans -> "true" / "false"
    - anything else (objects, arrays, null) -> None, i.e. "not given"
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return None


def lenient_count(value: Any) -> int | str | None:
    """
    Coerce a slide/item count. Integers and whole floats become int, strings
    pass through, anything else is dropped so the default applies.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int) or isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class GeminiRequest(BaseModel):
    """Body of POST /gemini. Presence of prompt is checked downstream, not here."""
    model_config = ConfigDict(populate_by_name=True)

    prompt: str | None = None
    type: str | None = None
    slides: int | str | None = None
    system_instruction: str | None = Field(default=None, alias="systemInstruction")

    @field_validator("prompt", "type", "system_instruction", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return lenient_text(value)

    @field_validator("slides", mode="before")
    @classmethod
    def coerce_count(cls, value):
        return lenient_count(value)


class PexelRequest(BaseModel):
    """Body of POST /pexel. items is passed to the vendor as per_page."""
    query: str | None = None
    items: int | str | None = None

    @field_validator("query", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return lenient_text(value)

    @field_validator("items", mode="before")
    @classmethod
    def coerce_count(cls, value):
        return lenient_count(value)


class ProxyResult(BaseModel):
    result: Any
