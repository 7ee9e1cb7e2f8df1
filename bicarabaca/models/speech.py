"""Speech synthesis data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Voice:
    """A synthesis voice as reported by the platform."""
    name: str
    lang: str
    local_service: bool = False
    default: bool = False
    voice_uri: Optional[str] = None


@dataclass(frozen=True)
class Utterance:
    """Text to be spoken together with its playback parameters."""
    text: str
    lang: str = "id-ID"
    rate: float = 0.9
    pitch: float = 1.0
    volume: float = 1.0
    voice: Optional[Voice] = None
