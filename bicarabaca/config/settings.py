"""Typed views over configuration sections."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator


class _Section(BaseModel):
    model_config = {"extra": "ignore"}

    @classmethod
    def from_section(cls, section: Dict[str, Any]):
        try:
            return cls.model_validate(section or {})
        except ValidationError as e:
            raise ValueError(f"Invalid '{cls.__name__}' configuration: {e}")


class DictationSettings(_Section):
    locale: str = "id-ID"
    restart_delay_seconds: float = Field(default=0.1, ge=0.0)
    max_restarts: Optional[int] = Field(default=None, ge=0)
    fatal_error_codes: List[str] = Field(
        default_factory=lambda: ["language-not-supported", "bad-grammar"])

    @field_validator("locale")
    @classmethod
    def _locale_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("locale must not be empty")
        return value.strip()


class SpeechSettings(_Section):
    locale: str = "id-ID"
    rate: float = Field(default=0.9, gt=0.0, le=10.0)
    pitch: float = Field(default=1.0, ge=0.0, le=2.0)
    volume: float = Field(default=1.0, ge=0.0, le=1.0)
    provider_hints: List[str] = Field(default_factory=lambda: ["google"])
    style_hints: List[str] = Field(
        default_factory=lambda: ["female", "male", "natural", "neural", "wavenet"])


class ExportSettings(_Section):
    directory: str = "exports"
    encoding: str = "utf-8"
