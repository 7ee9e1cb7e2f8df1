"""Read-aloud service on top of the synthesis port."""

import logging
from typing import List, Optional

from pubsub import pub

from ..config.settings import SpeechSettings
from ..errors import BicaraBacaError, EmptyInput, SynthesisFailure, SynthesisUnavailable
from ..models.speech import Utterance, Voice
from ..notifications import NotificationPublisher
from ..platform.base import AbstractSynthesisPort
from ..platform.publishers import SynthesisEventPublisher, unsubscribe_all
from .voice_selector import VoicePreferences, select_voice, primary_subtag, normalize_locale

logger = logging.getLogger(__name__)

STATUS_PLAYING = "🔊 Playing audio..."
STATUS_FINISHED = "✅ Finished playing!"

# Reported by platforms when playback is cut short by cancel(); not a failure
CANCELLED_ERROR_CODES = frozenset({"canceled", "interrupted"})


class SpeechService:
    """Speaks text in the configured locale with the best available voice."""

    def __init__(self,
                 synthesis: Optional[AbstractSynthesisPort],
                 notifier: NotificationPublisher,
                 settings: Optional[SpeechSettings] = None):
        """Initialize speech service.

        Args:
            synthesis: Synthesis port, or None if the platform has none
            notifier: Publisher for status updates
            settings: Locale and playback parameters
        """
        self.synthesis = synthesis
        self.notifier = notifier
        self.settings = settings or SpeechSettings()
        self.preferences = VoicePreferences(
            provider_hints=tuple(self.settings.provider_hints),
            style_hints=tuple(self.settings.style_hints),
        )
        self.voice: Optional[Voice] = None
        self.is_speaking = False
        self.last_error: Optional[BicaraBacaError] = None
        self._listeners: List = []
        self._topic_names: List[str] = []

        if synthesis is not None:
            self.synthesis_publisher = SynthesisEventPublisher(notifier.topic_prefix)
            synthesis.bind(self.synthesis_publisher)
            topics = self.synthesis_publisher.topics
            for listener, topic_name in ((self._on_started, topics.started),
                                         (self._on_ended, topics.ended),
                                         (self._on_error, topics.error),
                                         (self._on_voices_changed, topics.voices_changed)):
                pub.subscribe(listener, topic_name)
                self._listeners.append(listener)
                self._topic_names.append(topic_name)
            self.refresh_voice()
        else:
            logger.warning("Speech synthesis not supported on this platform")

    @property
    def available(self) -> bool:
        return self.synthesis is not None

    def refresh_voice(self) -> Optional[Voice]:
        """Re-run voice selection against the platform's current voice list."""
        if self.synthesis is None:
            return None
        voices = self.synthesis.list_voices()
        language = primary_subtag(self.settings.locale)
        local_voices = [v.name for v in voices if primary_subtag(v.lang) == language]
        logger.info(f"📢 Available {language} voices: {local_voices}")

        self.voice = select_voice(voices, self.settings.locale, self.preferences)
        if self.voice is not None:
            logger.info(f"✅ Using voice: {self.voice.name}")
        else:
            logger.info(f"No {self.settings.locale} voice yet, platform default will be used")
        return self.voice

    def speak(self, text: str) -> Optional[Utterance]:
        """Speak ``text`` aloud, interrupting anything already playing.

        Args:
            text: Text to speak

        Returns:
            The utterance handed to the synthesis port, or None if the port
            rejected it (reported through status and ``last_error``)

        Raises:
            EmptyInput: ``text`` is empty or whitespace
            SynthesisUnavailable: The platform has no speech synthesis
        """
        text = (text or "").strip()
        if not text:
            raise EmptyInput("No text to speak")
        if self.synthesis is None:
            raise SynthesisUnavailable()

        self.synthesis.cancel()
        if self.voice is None:
            self.refresh_voice()

        utterance = Utterance(
            text=text,
            lang=self.settings.locale,
            rate=self.settings.rate,
            pitch=self.settings.pitch,
            volume=self.settings.volume,
            voice=self.voice,
        )
        self.last_error = None
        logger.info(f"Speaking {len(text)} chars in {normalize_locale(utterance.lang)}")
        try:
            self.synthesis.speak(utterance)
        except Exception as e:
            logger.error(f"Speech synthesis failed: {e}")
            self._report_failure(SynthesisFailure(str(e)))
            return None
        return utterance

    def cancel(self) -> None:
        """Stop playback, if any."""
        if self.synthesis is None:
            return
        self.synthesis.cancel()
        self.is_speaking = False

    def shutdown(self) -> None:
        self.cancel()
        unsubscribe_all(self._listeners, self._topic_names)
        self._listeners = []
        self._topic_names = []

    def _on_started(self) -> None:
        self.is_speaking = True
        self.notifier.publish_status(STATUS_PLAYING)

    def _on_ended(self) -> None:
        self.is_speaking = False
        self.notifier.publish_status(STATUS_FINISHED)

    def _on_error(self, code: str, message: str) -> None:
        if code in CANCELLED_ERROR_CODES:
            # Late report for an utterance we cancelled; a newer one may be playing
            logger.debug(f"Speech playback {code}")
            return
        self.is_speaking = False
        logger.error(f"Speech synthesis error: {code} {message}")
        self._report_failure(SynthesisFailure(message or code, code=code))

    def _report_failure(self, error: SynthesisFailure) -> None:
        self.is_speaking = False
        self.last_error = error
        self.notifier.publish_status(f"❌ {error.user_message}")

    def _on_voices_changed(self) -> None:
        logger.debug("Voice list changed")
        self.refresh_voice()
