"""Speech synthesis for BicaraBaca."""

from .synthesis import SpeechService
from .voice_selector import VoicePreferences, select_voice, rank_voices

__all__ = [
    "SpeechService",
    "VoicePreferences",
    "select_voice",
    "rank_voices",
]
