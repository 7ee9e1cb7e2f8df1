"""Data models for the BicaraBaca application."""

from .transcription import RecognitionResult, RecognitionResultBatch, Transcript
from .session import SessionState, SessionInfo
from .speech import Voice, Utterance
from .events import TranscriptEvent, SessionEvent

__all__ = [
    "RecognitionResult",
    "RecognitionResultBatch",
    "Transcript",
    "SessionState",
    "SessionInfo",
    "Voice",
    "Utterance",
    "TranscriptEvent",
    "SessionEvent",
]
