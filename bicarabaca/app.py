"""Application facade: wires configuration, logging, platform ports and services.

The UI layer holds one BicaraBacaApp, calls its operations from button
handlers and subscribes to ``<topic_prefix>.status``, ``.transcript`` and
``.session`` for display.
"""

import sys
import uuid
import logging
from pathlib import Path
from typing import List, Optional

from .config import BicaraBacaConfig
from .dictation.monitor import TranscriptMonitor
from .dictation.scheduler import Scheduler
from .dictation.session import DictationSession
from .errors import ExportFailed
from .models.speech import Utterance
from .notifications import NotificationPublisher
from .platform.base import Platform
from .speech.synthesis import SpeechService
from .storage.exporter import TextExporter, KIND_TYPED_TEXT, KIND_DICTATED_TEXT

logger = logging.getLogger(__name__)

STATUS_SAVED = "💾 Text saved!"


class BicaraBacaApp:
    """One running instance of the read-aloud and dictation app."""

    def __init__(self,
                 platform: Platform,
                 config: Optional[BicaraBacaConfig] = None,
                 config_path: Optional[str] = None,
                 scheduler: Optional[Scheduler] = None,
                 topic_prefix: Optional[str] = None,
                 configure_logging: bool = True,
                 monitor: bool = False):
        """Initialize the app.

        Args:
            platform: Capabilities of the running platform
            config: Loaded configuration; loaded from ``config_path`` if None
            config_path: YAML config file, defaults are used if None
            scheduler: Scheduler for recognizer restarts
            topic_prefix: Prefix for all pub/sub topics of this instance
            configure_logging: Install log handlers from the config
            monitor: Print dictation activity to the console
        """
        self.config = config or BicaraBacaConfig(config_path)
        if configure_logging:
            log_level = self.config.get('logging.level', 'INFO')
            setup_logging(self.config, log_level)

        self.platform = platform
        self.topic_prefix = topic_prefix or f"bicarabaca_{uuid.uuid4().hex[:8]}"
        self.notifier = NotificationPublisher(self.topic_prefix)

        logger.info("Initializing services...")
        self.monitor = TranscriptMonitor(self.topic_prefix) if monitor else None
        self.dictation = DictationSession(
            recognition=platform.recognition,
            microphone=platform.microphone,
            notifier=self.notifier,
            settings=self.config.dictation_settings(),
            scheduler=scheduler,
        )
        self.speech = SpeechService(
            synthesis=platform.synthesis,
            notifier=self.notifier,
            settings=self.config.speech_settings(),
        )
        export_settings = self.config.export_settings()
        self.exporter = TextExporter(self.config.get_export_directory(), export_settings.encoding)

        self.check_platform_support()

    # Dictation

    def start_session(self, existing_text: Optional[str] = None) -> None:
        """Start dictation. Raises RecognitionUnavailable."""
        self.dictation.start_session(existing_text)

    def stop_session(self) -> str:
        return self.dictation.stop_session()

    def clear_session(self) -> None:
        self.dictation.clear_session()
        self.speech.cancel()

    @property
    def transcript_text(self) -> str:
        return self.dictation.display_text

    # Read aloud

    def speak(self, text: str) -> Optional[Utterance]:
        """Speak typed text. Raises EmptyInput / SynthesisUnavailable."""
        return self.speech.speak(text)

    def read_transcript(self) -> Optional[Utterance]:
        """Speak the dictated text back."""
        return self.speech.speak(self.dictation.display_text)

    def cancel_speech(self) -> None:
        self.speech.cancel()

    # Export

    def save_text(self, text: str, kind: str = KIND_TYPED_TEXT) -> Optional[Path]:
        """Save text to a file.

        Returns:
            Path of the written file, or None if writing failed (reported
            through status)

        Raises:
            EmptyInput: Nothing to save
        """
        try:
            path = self.exporter.export(text, kind)
        except ExportFailed as e:
            logger.error(f"Save error: {e}")
            self.notifier.publish_status(f"❌ {e.user_message}")
            return None
        self.notifier.publish_status(STATUS_SAVED)
        return path

    def save_transcript(self) -> Optional[Path]:
        return self.save_text(self.dictation.display_text, KIND_DICTATED_TEXT)

    # Lifecycle

    def stop_all_audio(self) -> None:
        """Silence everything, e.g. when leaving a screen."""
        self.speech.cancel()
        if self.dictation.state.is_active:
            self.dictation.stop_session()

    def check_platform_support(self) -> List[str]:
        """Log and return the capabilities this platform lacks."""
        missing = self.platform.missing_capabilities()
        for capability in missing:
            logger.warning(f"{capability.capitalize()} not supported")
        return missing

    def shutdown(self) -> None:
        logger.info("BicaraBaca shutting down")
        self.dictation.shutdown()
        self.speech.shutdown()
        if self.monitor is not None:
            self.monitor.shutdown()


def setup_logging(config: BicaraBacaConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    # Get log file path from config
    log_file_path = config.get('logging.file_path', 'logs/bicarabaca.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    # Set up handlers
    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("BicaraBaca starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)
