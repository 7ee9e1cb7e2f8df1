"""Publishes status text, transcript updates and session changes to the UI."""

import logging
from pubsub import pub

from .models.events import TranscriptEvent, SessionEvent

logger = logging.getLogger(__name__)


class NotificationTopics:
    """Topic names the UI layer subscribes to."""

    def __init__(self, prefix: str):
        self.status = f"{prefix}.status"
        self.transcript = f"{prefix}.transcript"
        self.session = f"{prefix}.session"


class NotificationPublisher:
    """Publishes UI notifications using pubsub.pub."""

    def __init__(self, topic_prefix: str):
        """Initialize notification publisher.

        Args:
            topic_prefix: Prefix shared by all topics of one app instance
        """
        self.topic_prefix = topic_prefix
        self.topics = NotificationTopics(topic_prefix)
        self.last_status = ""
        logger.info(f"NotificationPublisher initialized with prefix: {topic_prefix}")

    def publish_status(self, message: str) -> None:
        """Publish a status line for the status bar."""
        self.last_status = message
        pub.sendMessage(self.topics.status, message=message)
        logger.debug(f"Status: {message}")

    def publish_transcript(self, event: TranscriptEvent) -> None:
        pub.sendMessage(self.topics.transcript, event=event)

    def publish_session(self, event: SessionEvent) -> None:
        pub.sendMessage(self.topics.session, event=event)
        logger.debug(f"Session {event.session_id}: {event.previous_state.value} -> {event.state.value}")
