"""Abstract base classes for platform ports.

Adapters for a concrete platform subclass these and report events through
the publisher they are bound to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

from ..models.speech import Utterance, Voice
from .publishers import RecognitionEventPublisher, SynthesisEventPublisher

logger = logging.getLogger(__name__)


class AbstractRecognitionPort(ABC):
    """Continuous speech-to-text session supplied by the platform.

    The platform may end a continuous session on its own after some idle or
    elapsed time; it reports that through ``ended`` like any other stop.
    """

    def __init__(self):
        self.publisher: Optional[RecognitionEventPublisher] = None

    def bind(self, publisher: RecognitionEventPublisher) -> None:
        """Attach the publisher this port reports its events to."""
        self.publisher = publisher

    @abstractmethod
    def configure(self, locale: str, continuous: bool = True,
                  interim_results: bool = True, max_alternatives: int = 1) -> None:
        """Configure the recognizer before the first start."""
        pass

    @abstractmethod
    def start(self) -> None:
        """Start recognizing. May raise if the platform is not ready yet."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop recognizing. May raise if already stopped."""
        pass


class AbstractSynthesisPort(ABC):
    """Text-to-speech service supplied by the platform."""

    def __init__(self):
        self.publisher: Optional[SynthesisEventPublisher] = None

    def bind(self, publisher: SynthesisEventPublisher) -> None:
        self.publisher = publisher

    @abstractmethod
    def speak(self, utterance: Utterance) -> None:
        """Queue an utterance for playback."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop current playback and drop anything queued."""
        pass

    @abstractmethod
    def list_voices(self) -> List[Voice]:
        """Voices currently known to the platform.

        The list is filled asynchronously and may be empty at first; the port
        publishes ``voices_changed`` once it changes.
        """
        pass


class AbstractMicrophonePort(ABC):
    """Microphone permission gate."""

    @abstractmethod
    def request_access(self, on_granted: Callable[[], None],
                       on_denied: Callable[[str, str], None]) -> None:
        """Ask the platform for microphone access.

        Exactly one of the callbacks fires, possibly later. ``on_denied``
        receives the platform error name (e.g. ``NotAllowedError``) and a
        message.
        """
        pass


@dataclass
class Platform:
    """Capabilities offered by the running platform.

    A port left as None means the capability is missing.
    """
    recognition: Optional[AbstractRecognitionPort] = None
    synthesis: Optional[AbstractSynthesisPort] = None
    microphone: Optional[AbstractMicrophonePort] = None

    def missing_capabilities(self) -> List[str]:
        missing = []
        if self.recognition is None:
            missing.append("speech recognition")
        if self.synthesis is None:
            missing.append("speech synthesis")
        if self.microphone is None:
            missing.append("microphone access")
        return missing
