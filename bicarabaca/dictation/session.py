"""Dictation session controller.

Drives a continuous recognition port, feeds its result batches through a
TranscriptAccumulator and restarts the port when the platform ends a run
while the user is still recording.

States and transitions::

    IDLE/STOPPED --start_session--> REQUESTING_PERMISSION
    REQUESTING_PERMISSION --granted--> LISTENING
    REQUESTING_PERMISSION --denied--> STOPPED
    LISTENING --ended (still recording)--> RESTARTING --delay--> LISTENING
    LISTENING --fatal error--> STOPPED
    any active state --stop_session--> STOPPED
"""

import logging
import threading
import uuid
from datetime import datetime
from typing import Optional, List

from pubsub import pub

from ..config.settings import DictationSettings
from ..errors import (
    BicaraBacaError,
    DeviceUnavailable,
    RecognitionFatal,
    RecognitionUnavailable,
    TransientRecognitionGlitch,
    SUPPRESSED_RECOGNITION_CODES,
    classify_microphone_error,
    classify_recognition_error,
)
from ..models.events import SessionEvent, TranscriptEvent
from ..models.session import SessionInfo, SessionState
from ..models.transcription import RecognitionResultBatch, Transcript
from ..notifications import NotificationPublisher
from ..platform.base import AbstractMicrophonePort, AbstractRecognitionPort
from ..platform.publishers import RecognitionEventPublisher, unsubscribe_all
from .accumulator import TranscriptAccumulator
from .scheduler import Scheduler, ScheduledCall, ThreadingScheduler

logger = logging.getLogger(__name__)

STATUS_REQUESTING_PERMISSION = "🎤 Requesting microphone permission..."
STATUS_STARTING = "🎤 Starting recording..."
STATUS_RECORDING = "🔴 Recording... speak now!"
STATUS_STOPPED = "✅ Recording finished! Text saved"
STATUS_CLEARED = "🗑️ Recording cleared! Ready to record again"


class DictationSession:
    """Owns one dictation transcript and the recognition port lifecycle."""

    def __init__(self,
                 recognition: Optional[AbstractRecognitionPort],
                 microphone: Optional[AbstractMicrophonePort],
                 notifier: NotificationPublisher,
                 settings: Optional[DictationSettings] = None,
                 scheduler: Optional[Scheduler] = None,
                 session_id: Optional[str] = None):
        """Initialize dictation session.

        Args:
            recognition: Recognition port, or None if the platform has none
            microphone: Microphone permission port, or None if unavailable
            notifier: Publisher for status, transcript and state updates
            settings: Dictation settings (locale, restart delay, ...)
            scheduler: Runs delayed restarts; a threading one by default
            session_id: Identifier used in published events
        """
        self.settings = settings or DictationSettings()
        self.session_id = session_id or uuid.uuid4().hex[:8]
        self.recognition = recognition
        self.microphone = microphone
        self.notifier = notifier
        self.scheduler = scheduler or ThreadingScheduler()

        self.lock = threading.RLock()
        self.state = SessionState.IDLE
        self.recording = False  # user intent; only stop_session and fatal errors clear it
        self.epoch = 0
        self.restart_count = 0
        self.accumulator = TranscriptAccumulator()
        self.display_text = ""
        self.last_error: Optional[BicaraBacaError] = None
        self.started_at: Optional[datetime] = None
        self.stopped_at: Optional[datetime] = None

        self._pending_restart: Optional[ScheduledCall] = None
        self._permission_request_id = 0
        self._pending_seed = ""
        self._listeners: List = []
        self._topic_names: List[str] = []

        if recognition is not None:
            self.recognition_publisher = RecognitionEventPublisher(notifier.topic_prefix)
            recognition.bind(self.recognition_publisher)
            recognition.configure(self.settings.locale, continuous=True,
                                  interim_results=True, max_alternatives=1)
            topics = self.recognition_publisher.topics
            self._subscribe(self._on_recognition_started, topics.started)
            self._subscribe(self._on_recognition_result, topics.result)
            self._subscribe(self._on_recognition_error, topics.error)
            self._subscribe(self._on_recognition_ended, topics.ended)
        else:
            logger.warning("Speech recognition not supported on this platform")

        logger.info(f"DictationSession {self.session_id} initialized (locale={self.settings.locale})")

    def _subscribe(self, listener, topic_name: str) -> None:
        pub.subscribe(listener, topic_name)
        self._listeners.append(listener)
        self._topic_names.append(topic_name)

    @property
    def transcript(self) -> Transcript:
        return self.accumulator.transcript

    @property
    def is_recording(self) -> bool:
        return self.recording

    # ------------------------------------------------------------------
    # Operations called by the UI layer
    # ------------------------------------------------------------------

    def start_session(self, existing_text: Optional[str] = None) -> None:
        """Begin dictation, appending to the text already on screen.

        Args:
            existing_text: Text currently in the output field. Defaults to the
                text this session displayed last.

        Raises:
            RecognitionUnavailable: The platform has no speech recognition
        """
        with self.lock:
            if self.recognition is None:
                raise RecognitionUnavailable()
            if self.state.is_active:
                logger.warning("Dictation already in progress")
                return

            self.last_error = None
            self._pending_seed = existing_text if existing_text is not None else self.display_text
            self._permission_request_id += 1
            request_id = self._permission_request_id
            self._set_state(SessionState.REQUESTING_PERMISSION)
            self.notifier.publish_status(STATUS_REQUESTING_PERMISSION)

            if self.microphone is None:
                self._fail(DeviceUnavailable("Microphone access is not supported on this platform"))
                return

        # The grant may arrive on another thread; never wait for it under the lock
        self.microphone.request_access(
            on_granted=lambda: self._on_permission_granted(request_id),
            on_denied=lambda name, message: self._on_permission_denied(request_id, name, message),
        )

    def stop_session(self) -> str:
        """Stop dictation on user request.

        Returns:
            The final displayed text
        """
        with self.lock:
            self.recording = False
            self._cancel_pending_restart()
            self._permission_request_id += 1

            if not self.state.is_active:
                logger.warning("No dictation in progress")
                return self.display_text

            previous = self.state
            logger.info(f"Stopping dictation (state={previous.value}, epoch={self.epoch})")
            if previous in (SessionState.LISTENING, SessionState.RESTARTING):
                self._stop_port()
                self._freeze_transcript()
            self.stopped_at = datetime.now()
            self._set_state(SessionState.STOPPED)
            self.notifier.publish_status(STATUS_STOPPED)
            return self.display_text

    def clear_session(self) -> None:
        """Stop if needed and throw the transcript away."""
        with self.lock:
            if self.state.is_active:
                self.stop_session()
            self.accumulator.reset()
            self.epoch = 0
            self.restart_count = 0
            self.display_text = ""
            if self.state != SessionState.STOPPED:
                self._set_state(SessionState.STOPPED)
            self._publish_transcript(is_final=True)
            self.notifier.publish_status(STATUS_CLEARED)
            logger.info(f"DictationSession {self.session_id} cleared")

    def shutdown(self) -> None:
        """Stop dictation and detach from the recognition topics."""
        logger.info(f"Shutting down DictationSession {self.session_id}...")
        with self.lock:
            if self.state.is_active:
                self.stop_session()
        unsubscribe_all(self._listeners, self._topic_names)
        self._listeners = []
        self._topic_names = []
        logger.info(f"DictationSession {self.session_id} shutdown complete")

    def get_info(self) -> SessionInfo:
        with self.lock:
            return SessionInfo(
                session_id=self.session_id,
                state=self.state,
                epoch=self.epoch,
                restart_count=self.restart_count,
                started_at=self.started_at,
                stopped_at=self.stopped_at,
                text=self.display_text,
            )

    # ------------------------------------------------------------------
    # Permission callbacks
    # ------------------------------------------------------------------

    def _on_permission_granted(self, request_id: int) -> None:
        with self.lock:
            if request_id != self._permission_request_id or self.state != SessionState.REQUESTING_PERMISSION:
                logger.info("Ignoring microphone grant for a request that is no longer pending")
                return

            logger.info("Microphone permission granted")
            self.recording = True
            self.accumulator.seed(self._pending_seed or "")
            self.epoch = 0
            self.restart_count = 0
            self.started_at = datetime.now()
            self.stopped_at = None
            self.display_text = self.accumulator.transcript.text

            self._set_state(SessionState.LISTENING)
            self.notifier.publish_status(STATUS_STARTING)
            self._publish_transcript()
            self._start_port("start")

    def _on_permission_denied(self, request_id: int, name: str, message: str) -> None:
        with self.lock:
            if request_id != self._permission_request_id or self.state != SessionState.REQUESTING_PERMISSION:
                logger.info(f"Ignoring microphone denial ({name}) for a request that is no longer pending")
                return
            logger.error(f"Microphone permission error: {name}: {message}")
            self._fail(classify_microphone_error(name, message))

    # ------------------------------------------------------------------
    # Recognition port events
    # ------------------------------------------------------------------

    def _on_recognition_started(self) -> None:
        with self.lock:
            logger.info(f"Speech recognition started (epoch {self.epoch})")
            if self.recording:
                self.notifier.publish_status(STATUS_RECORDING)

    def _on_recognition_result(self, batch: RecognitionResultBatch) -> None:
        with self.lock:
            if self.state != SessionState.LISTENING or not self.recording:
                logger.debug(f"Ignoring recognition result while {self.state.value}")
                return
            transcript = self.accumulator.apply(batch, self.epoch)
            self.display_text = transcript.text
            self._publish_transcript()

    def _on_recognition_error(self, code: str, message: str) -> None:
        with self.lock:
            error = classify_recognition_error(code, message, self.settings.fatal_error_codes)
            if not self.state.is_active:
                logger.debug(f"Ignoring recognition error '{code}' while {self.state.value}")
                return

            if isinstance(error, TransientRecognitionGlitch):
                if code in SUPPRESSED_RECOGNITION_CODES:
                    logger.debug(f"Recognition {code}, ignoring")
                else:
                    logger.info(f"Recognition {code}, continuing...")
                return

            if error.fatal:
                logger.error(f"Speech recognition error: {code} {message}")
                self._fail(error)
                return

            logger.warning(f"Recognition error: {code} {message}")
            self.notifier.publish_status(f"⚠️ {error.user_message}")

    def _on_recognition_ended(self) -> None:
        with self.lock:
            if not self.recording or self.state != SessionState.LISTENING:
                logger.info(f"Speech recognition ended (state={self.state.value})")
                return

            max_restarts = self.settings.max_restarts
            if max_restarts is not None and self.restart_count >= max_restarts:
                logger.error(f"Recognition ended after {self.restart_count} restarts, giving up")
                self._fail(RecognitionFatal(f"Recognition restart limit ({max_restarts}) reached"))
                return

            # Indices restart at zero in the next run; bump before it can deliver anything
            self.epoch += 1
            token = self.epoch
            self._set_state(SessionState.RESTARTING)
            delay = self.settings.restart_delay_seconds
            logger.info(f"Speech recognition ended while recording; restarting in {delay}s (epoch {token})")
            self._pending_restart = self.scheduler.call_later(delay, lambda: self._restart(token))

    def _restart(self, token: int) -> None:
        with self.lock:
            if not self.recording or token != self.epoch or self.state != SessionState.RESTARTING:
                logger.info(f"Skipping stale restart for epoch {token}")
                return
            self._pending_restart = None
            self.restart_count += 1
            self._set_state(SessionState.LISTENING)
            if self._start_port("restart"):
                logger.info(f"Recognition restarted (epoch {self.epoch}, restart #{self.restart_count})")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _start_port(self, action: str) -> bool:
        try:
            self.recognition.start()
            return True
        except Exception as e:
            logger.error(f"Recognition {action} failed: {e}")
            self._fail(RecognitionFatal(f"Recognition {action} failed: {e}"))
            return False

    def _stop_port(self) -> None:
        try:
            self.recognition.stop()
        except Exception as e:
            logger.info(f"Stop recognition error: {e}")

    def _cancel_pending_restart(self) -> None:
        if self._pending_restart is not None:
            self._pending_restart.cancel()
            self._pending_restart = None
            logger.debug("Cancelled pending recognition restart")

    def _fail(self, error: BicaraBacaError) -> None:
        """Stop the session because of ``error`` and tell the user once."""
        previous = self.state
        self.last_error = error
        self.recording = False
        self._cancel_pending_restart()
        if previous in (SessionState.LISTENING, SessionState.RESTARTING):
            self._stop_port()
            self._freeze_transcript()
        self.stopped_at = datetime.now()
        self._set_state(SessionState.STOPPED, error=error)
        self.notifier.publish_status(f"❌ {error.user_message}")

    def _freeze_transcript(self) -> None:
        self.display_text = self.accumulator.freeze()
        self._publish_transcript(is_final=True)

    def _publish_transcript(self, is_final: bool = False) -> None:
        transcript = self.accumulator.transcript
        self.notifier.publish_transcript(TranscriptEvent(
            session_id=self.session_id,
            text=self.display_text,
            confirmed=transcript.confirmed,
            provisional=transcript.provisional,
            epoch=self.epoch,
            is_final=is_final,
        ))

    def _set_state(self, state: SessionState, error: Optional[BicaraBacaError] = None) -> None:
        previous = self.state
        self.state = state
        self.notifier.publish_session(SessionEvent(
            session_id=self.session_id,
            state=state,
            previous_state=previous,
            error=error,
        ))
