"""Port event publishers for pub/sub event delivery.

Platform adapters never call the core directly. They report what the
platform did through one of these publishers and the core subscribes to the
resulting topics, so every event goes through the same ordered message path.
"""

import logging
from typing import List
from pubsub import pub

from ..models.transcription import RecognitionResultBatch

logger = logging.getLogger(__name__)


class RecognitionTopics:
    """Topic names for one session's recognition events."""

    def __init__(self, prefix: str):
        self.started = f"{prefix}.recognition.started"
        self.result = f"{prefix}.recognition.result"
        self.error = f"{prefix}.recognition.error"
        self.ended = f"{prefix}.recognition.ended"


class SynthesisTopics:
    """Topic names for one session's synthesis events."""

    def __init__(self, prefix: str):
        self.started = f"{prefix}.synthesis.started"
        self.ended = f"{prefix}.synthesis.ended"
        self.error = f"{prefix}.synthesis.error"
        self.voices_changed = f"{prefix}.synthesis.voices_changed"


class RecognitionEventPublisher:
    """Publishes recognition port events using pubsub.pub."""

    def __init__(self, topic_prefix: str):
        """Initialize recognition event publisher.

        Args:
            topic_prefix: Prefix shared by all topics of one session
        """
        self.topics = RecognitionTopics(topic_prefix)
        logger.info(f"RecognitionEventPublisher initialized with prefix: {topic_prefix}")

    def started(self) -> None:
        pub.sendMessage(self.topics.started)
        logger.debug("Published recognition started")

    def result(self, batch: RecognitionResultBatch) -> None:
        """Publish a batch of recognition results.

        Args:
            batch: Cumulative results of the current recognition run
        """
        pub.sendMessage(self.topics.result, batch=batch)
        logger.debug(f"Published recognition result: {len(batch)} entries from index {batch.result_index}")

    def error(self, code: str, message: str = "") -> None:
        pub.sendMessage(self.topics.error, code=code, message=message)
        logger.debug(f"Published recognition error: {code}")

    def ended(self) -> None:
        pub.sendMessage(self.topics.ended)
        logger.debug("Published recognition ended")


class SynthesisEventPublisher:
    """Publishes synthesis port events using pubsub.pub."""

    def __init__(self, topic_prefix: str):
        self.topics = SynthesisTopics(topic_prefix)
        logger.info(f"SynthesisEventPublisher initialized with prefix: {topic_prefix}")

    def started(self) -> None:
        pub.sendMessage(self.topics.started)

    def ended(self) -> None:
        pub.sendMessage(self.topics.ended)

    def error(self, code: str, message: str = "") -> None:
        pub.sendMessage(self.topics.error, code=code, message=message)
        logger.debug(f"Published synthesis error: {code}")

    def voices_changed(self) -> None:
        pub.sendMessage(self.topics.voices_changed)


def unsubscribe_all(listeners: List, topic_names: List[str]) -> None:
    """Unsubscribe ``listeners[i]`` from ``topic_names[i]``, logging failures."""
    for listener, topic_name in zip(listeners, topic_names):
        try:
            pub.unsubscribe(listener, topic_name)
        except Exception as e:
            logger.warning(f"Error during unsubscribe from {topic_name}: {e}")
