"""Platform ports and their event publishers."""

from .base import (
    AbstractRecognitionPort,
    AbstractSynthesisPort,
    AbstractMicrophonePort,
    Platform,
)
from .publishers import (
    RecognitionEventPublisher,
    SynthesisEventPublisher,
    RecognitionTopics,
    SynthesisTopics,
)

__all__ = [
    "AbstractRecognitionPort",
    "AbstractSynthesisPort",
    "AbstractMicrophonePort",
    "Platform",
    "RecognitionEventPublisher",
    "SynthesisEventPublisher",
    "RecognitionTopics",
    "SynthesisTopics",
]
