"""Debug transcript monitor that prints dictation activity to the console.

Subscribes to an app's notification topics, records every status line and
transcript update, prints each frozen transcript as it arrives and prints a
summary on shutdown.
"""

import logging
import threading
from typing import List, Optional, Dict, Any

from pubsub import pub
from rich.console import Console
from rich.panel import Panel

from ..models.events import TranscriptEvent, SessionEvent
from ..notifications import NotificationTopics

logger = logging.getLogger(__name__)


class TranscriptMonitor:
    """Collects notifications and prints them with rich."""

    def __init__(self, topic_prefix: str, console: Optional[Console] = None):
        """Initialize transcript monitor.

        Args:
            topic_prefix: Prefix of the app's notification topics
            console: Console to print to (stdout by default)
        """
        self.topics = NotificationTopics(topic_prefix)
        self.console = console or Console()

        self.status_lines: List[str] = []
        self.final_transcripts: List[TranscriptEvent] = []
        self.latest: Optional[TranscriptEvent] = None
        self.session_events: List[SessionEvent] = []
        self.lock = threading.RLock()

        pub.subscribe(self._on_status, self.topics.status)
        pub.subscribe(self._on_transcript, self.topics.transcript)
        pub.subscribe(self._on_session, self.topics.session)

        logger.info(f"TranscriptMonitor initialized - subscribed to {topic_prefix}.*")

    def _on_status(self, message: str) -> None:
        with self.lock:
            self.status_lines.append(message)
        self.console.print(f"[dim]status[/dim] {message}", markup=True, highlight=False)

    def _on_transcript(self, event: TranscriptEvent) -> None:
        with self.lock:
            self.latest = event
            if event.is_final:
                self.final_transcripts.append(event)
        if event.is_final and event.text:
            self.console.print(Panel(event.text, title=f"📄 Transcript {event.session_id}"))

    def _on_session(self, event: SessionEvent) -> None:
        with self.lock:
            self.session_events.append(event)
        if event.error is not None:
            self.console.print(f"[red]{event.error.user_message}[/red]")

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of collected notifications."""
        with self.lock:
            return {
                "status_count": len(self.status_lines),
                "final_count": len(self.final_transcripts),
                "restarts": sum(1 for e in self.session_events if e.state.value == "restarting"),
                "text": self.latest.text if self.latest else "",
            }

    def print_summary(self) -> None:
        summary = self.get_summary()
        self.console.rule("🎙️  DICTATION SUMMARY")
        self.console.print(f"Status messages: {summary['status_count']}")
        self.console.print(f"Recognizer restarts: {summary['restarts']}")
        if summary["text"]:
            self.console.print(Panel(summary["text"], title="📄 Latest text"))
        self.console.rule()

    def shutdown(self) -> None:
        """Unsubscribe and print the summary."""
        logger.info("Shutting down TranscriptMonitor...")
        for listener, topic_name in ((self._on_status, self.topics.status),
                                     (self._on_transcript, self.topics.transcript),
                                     (self._on_session, self.topics.session)):
            try:
                pub.unsubscribe(listener, topic_name)
            except Exception as e:
                logger.warning(f"Error during unsubscribe: {e}")
        self.print_summary()
        logger.info("TranscriptMonitor shutdown complete")
