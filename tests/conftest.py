"""Pytest configuration and fixtures for BicaraBaca tests."""

import pytest
import uuid
import logging
from typing import Callable, List, Optional

from pubsub import pub

from bicarabaca.config.settings import DictationSettings, SpeechSettings
from bicarabaca.dictation.scheduler import Scheduler, ScheduledCall
from bicarabaca.dictation.session import DictationSession
from bicarabaca.models.transcription import RecognitionResultBatch
from bicarabaca.models.speech import Voice
from bicarabaca.notifications import NotificationPublisher, NotificationTopics
from bicarabaca.platform.base import (
    AbstractMicrophonePort,
    AbstractRecognitionPort,
    AbstractSynthesisPort,
    Platform,
)


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class FakeRecognitionPort(AbstractRecognitionPort):
    """Recognition port driven by the test."""

    def __init__(self):
        super().__init__()
        self.calls: List[str] = []
        self.configured = None
        self.running = False
        self.start_error: Optional[Exception] = None
        self.stop_error: Optional[Exception] = None

    def configure(self, locale, continuous=True, interim_results=True, max_alternatives=1):
        self.configured = {
            "locale": locale,
            "continuous": continuous,
            "interim_results": interim_results,
            "max_alternatives": max_alternatives,
        }

    def start(self):
        self.calls.append("start")
        if self.start_error is not None:
            raise self.start_error
        self.running = True
        self.publisher.started()

    def stop(self):
        self.calls.append("stop")
        if self.stop_error is not None:
            raise self.stop_error
        if self.running:
            self.running = False
            self.publisher.ended()

    @property
    def start_count(self) -> int:
        return self.calls.count("start")

    # Helpers that play the platform's part

    def deliver(self, *entries, result_index: int = 0):
        self.publisher.result(RecognitionResultBatch.of(*entries, result_index=result_index))

    def end(self):
        """The platform ends the run on its own."""
        self.running = False
        self.publisher.ended()

    def fail(self, code: str, message: str = ""):
        self.publisher.error(code, message)


class FakeMicrophonePort(AbstractMicrophonePort):
    """Grants, denies, or holds the request until the test decides."""

    def __init__(self, mode: str = "grant", denial_name: str = "NotAllowedError"):
        self.mode = mode
        self.denial_name = denial_name
        self.requests = 0
        self.pending = None

    def request_access(self, on_granted, on_denied):
        self.requests += 1
        if self.mode == "grant":
            on_granted()
        elif self.mode == "deny":
            on_denied(self.denial_name, "Permission denied")
        else:
            self.pending = (on_granted, on_denied)

    def grant(self):
        on_granted, _ = self.pending
        on_granted()

    def deny(self, name: str = "NotAllowedError"):
        _, on_denied = self.pending
        on_denied(name, "Permission denied")


class FakeSynthesisPort(AbstractSynthesisPort):
    """Synthesis port that records what it was asked to say."""

    def __init__(self, voices: Optional[List[Voice]] = None):
        super().__init__()
        self.voices = list(voices or [])
        self.calls: List = []
        self.speak_error: Optional[Exception] = None

    def speak(self, utterance):
        self.calls.append(("speak", utterance))
        if self.speak_error is not None:
            raise self.speak_error

    def cancel(self):
        self.calls.append(("cancel", None))

    def list_voices(self):
        return list(self.voices)

    @property
    def spoken(self):
        return [u for name, u in self.calls if name == "speak"]

    def set_voices(self, voices: List[Voice]):
        self.voices = list(voices)
        self.publisher.voices_changed()

    def begin(self):
        self.publisher.started()

    def finish(self):
        self.publisher.ended()

    def fail(self, code: str, message: str = ""):
        self.publisher.error(code, message)


class _ManualCall(ScheduledCall):
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Fake clock: scheduled calls only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self.calls: List[_ManualCall] = []

    def call_later(self, delay_seconds, callback):
        call = _ManualCall(self.now + delay_seconds, callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> List[_ManualCall]:
        return [c for c in self.calls if not c.cancelled and c.due is not None]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        for call in sorted(self.pending, key=lambda c: c.due):
            if call.due <= self.now and not call.cancelled:
                call.due = None  # ran
                call.callback()


class NotificationRecorder:
    """Keeps everything the app tells the UI."""

    def __init__(self, topic_prefix: str):
        self.topics = NotificationTopics(topic_prefix)
        self.statuses: List[str] = []
        self.transcripts: List = []
        self.session_events: List = []
        pub.subscribe(self._on_status, self.topics.status)
        pub.subscribe(self._on_transcript, self.topics.transcript)
        pub.subscribe(self._on_session, self.topics.session)

    def _on_status(self, message):
        self.statuses.append(message)

    def _on_transcript(self, event):
        self.transcripts.append(event)

    def _on_session(self, event):
        self.session_events.append(event)

    @property
    def states(self):
        return [e.state for e in self.session_events]

    @property
    def errors(self):
        return [e.error for e in self.session_events if e.error is not None]

    def close(self):
        pub.unsubscribe(self._on_status, self.topics.status)
        pub.unsubscribe(self._on_transcript, self.topics.transcript)
        pub.unsubscribe(self._on_session, self.topics.session)


@pytest.fixture
def topic_prefix():
    """Unique topic prefix so tests never hear each other."""
    return f"test_{uuid.uuid4().hex[:12]}"


@pytest.fixture
def notifier(topic_prefix):
    return NotificationPublisher(topic_prefix)


@pytest.fixture
def recorder(topic_prefix):
    rec = NotificationRecorder(topic_prefix)
    yield rec
    rec.close()


@pytest.fixture
def recognition_port():
    return FakeRecognitionPort()


@pytest.fixture
def microphone():
    return FakeMicrophonePort()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def dictation_settings():
    return DictationSettings(locale="id-ID", restart_delay_seconds=0.1)


@pytest.fixture
def session(recognition_port, microphone, notifier, recorder, scheduler, dictation_settings):
    """Dictation session wired to fake ports and a manual clock."""
    s = DictationSession(
        recognition=recognition_port,
        microphone=microphone,
        notifier=notifier,
        settings=dictation_settings,
        scheduler=scheduler,
        session_id="test",
    )
    yield s
    s.shutdown()


@pytest.fixture
def indonesian_voices():
    return [
        Voice(name="Generic id-ID", lang="id-ID"),
        Voice(name="Damayanti", lang="id_ID", local_service=True),
        Voice(name="Google US English", lang="en-US"),
        Voice(name="Premium Google id-ID Female", lang="id-ID"),
    ]


@pytest.fixture
def synthesis_port(indonesian_voices):
    return FakeSynthesisPort(indonesian_voices)


@pytest.fixture
def speech_settings():
    return SpeechSettings(locale="id-ID")


@pytest.fixture
def platform(recognition_port, synthesis_port, microphone):
    return Platform(recognition=recognition_port, synthesis=synthesis_port, microphone=microphone)
