"""Error taxonomy for dictation and speech playback.

Every error carries a user-facing ``remedy`` so the UI layer can show a
single message without knowing where the error came from.
"""

from typing import Optional


class BicaraBacaError(Exception):
    """Base class for all application errors."""

    fatal = False
    remedy = "Something went wrong."

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.code = code
        super().__init__(message or self.remedy)

    @property
    def user_message(self) -> str:
        return self.remedy


class PermissionDenied(BicaraBacaError):
    """Microphone access was refused."""
    fatal = True
    remedy = ("Microphone permission was denied. Allow microphone access in the "
              "browser or system settings, then reload and try again.")


class DeviceUnavailable(BicaraBacaError):
    """No usable microphone was found."""
    fatal = True
    remedy = "No microphone was found. Make sure the device has a working microphone."


class RecognitionError(BicaraBacaError):
    """Error reported by the recognition port."""
    remedy = "Speech recognition was interrupted."


class TransientRecognitionGlitch(RecognitionError):
    """no-speech, audio-capture or aborted; the session carries on."""
    remedy = "No speech detected, still listening."


class RecognitionDisturbance(RecognitionError):
    """Unexpected but non-fatal recognizer error; the session carries on."""
    remedy = "There was a disturbance, still recording."


class RecognitionFatal(RecognitionError):
    """Recognizer error that ends the session."""
    fatal = True
    remedy = "Speech recognition stopped unexpectedly. Press record to try again."


class RecognitionUnavailable(BicaraBacaError):
    """The platform has no speech recognition."""
    fatal = True
    remedy = ("Speech recognition is not supported here. Use Chrome (Android/PC), "
              "Safari (iPhone/Mac) or Edge (Windows).")


class SynthesisUnavailable(BicaraBacaError):
    """The platform has no speech synthesis."""
    fatal = True
    remedy = "Text-to-speech is not supported here."


class SynthesisFailure(BicaraBacaError):
    """Playback failed part way through."""
    remedy = "There was a problem playing the audio."


class EmptyInput(BicaraBacaError):
    """Nothing to speak, play or save."""
    remedy = "There is no text yet. Write or record something first."


class ExportFailed(BicaraBacaError):
    """Saving text to a file failed."""
    remedy = "Failed to save the file."


TRANSIENT_RECOGNITION_CODES = frozenset({"no-speech", "audio-capture"})
SUPPRESSED_RECOGNITION_CODES = frozenset({"aborted"})
PERMISSION_RECOGNITION_CODES = frozenset({"not-allowed", "permission-denied", "service-not-allowed"})
DEFAULT_FATAL_RECOGNITION_CODES = frozenset({"language-not-supported", "bad-grammar"})

PERMISSION_DENIED_NAMES = frozenset({"NotAllowedError", "PermissionDeniedError", "SecurityError"})
DEVICE_MISSING_NAMES = frozenset({"NotFoundError", "DevicesNotFoundError", "OverconstrainedError"})


def classify_recognition_error(code: str, message: str = "",
                               fatal_codes=DEFAULT_FATAL_RECOGNITION_CODES) -> BicaraBacaError:
    """Map a recognition port error code onto the error taxonomy.

    Args:
        code: Error code reported by the port (e.g. ``no-speech``)
        message: Optional detail from the port
        fatal_codes: Codes that end the session

    Returns:
        The matching error instance. Permission codes map to
        ``PermissionDenied``, everything else to a ``RecognitionError``.
    """
    detail = message or code
    if code in TRANSIENT_RECOGNITION_CODES or code in SUPPRESSED_RECOGNITION_CODES:
        return TransientRecognitionGlitch(detail, code=code)
    if code in PERMISSION_RECOGNITION_CODES:
        return PermissionDenied(detail, code=code)
    if code in fatal_codes:
        return RecognitionFatal(detail, code=code)
    return RecognitionDisturbance(detail, code=code)


def classify_microphone_error(name: str, message: str = "") -> BicaraBacaError:
    """Map a microphone access failure onto the error taxonomy."""
    if name in PERMISSION_DENIED_NAMES:
        return PermissionDenied(message or name, code=name)
    if name in DEVICE_MISSING_NAMES:
        return DeviceUnavailable(message or name, code=name)
    return DeviceUnavailable(f"Microphone could not be accessed: {message or name}", code=name)
