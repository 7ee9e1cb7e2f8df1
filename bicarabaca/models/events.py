"""Event models published to the UI layer."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Any

from .session import SessionState


@dataclass
class TranscriptEvent:
    """Transcript update for display."""
    session_id: str
    text: str  # What the UI should display
    confirmed: str
    provisional: str
    epoch: int
    is_final: bool = False  # True once the session has stopped and the text is frozen
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class SessionEvent:
    """Session lifecycle event."""
    session_id: str
    state: SessionState
    previous_state: SessionState
    error: Optional[Any] = None  # BicaraBacaError behind the transition, if any
    timestamp: datetime = field(default_factory=datetime.now)
