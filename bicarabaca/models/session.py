"""Session-related data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SessionState(Enum):
    """Lifecycle state of a dictation session."""
    IDLE = "idle"
    REQUESTING_PERMISSION = "requesting_permission"
    LISTENING = "listening"
    RESTARTING = "restarting"
    STOPPED = "stopped"

    @property
    def is_active(self) -> bool:
        return self in (SessionState.REQUESTING_PERMISSION,
                        SessionState.LISTENING,
                        SessionState.RESTARTING)


@dataclass
class SessionInfo:
    """Summary of a dictation session."""
    session_id: str
    state: SessionState
    epoch: int
    restart_count: int
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None
    text: str = ""
