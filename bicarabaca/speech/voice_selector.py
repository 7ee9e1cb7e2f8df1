"""Picks the best synthesis voice for a locale."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models.speech import Voice

logger = logging.getLogger(__name__)

# Voice names that identify a locale's native voices, keyed by primary language subtag
LOCALE_NAME_HINTS: Dict[str, Tuple[str, ...]] = {
    "id": ("indonesia", "damayanti", "gadis", "ardi"),
    "ms": ("malay", "melayu", "amira"),
    "jv": ("javanese", "jawa"),
    "su": ("sundanese", "sunda"),
    "en": ("english",),
}


@dataclass(frozen=True)
class VoicePreferences:
    provider_hints: Tuple[str, ...] = ("google",)
    style_hints: Tuple[str, ...] = ("female", "male", "natural", "neural", "wavenet")
    name_hints: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: dict(LOCALE_NAME_HINTS))


def normalize_locale(locale: str) -> str:
    """'id_id' -> 'id-id'; comparison is case-insensitive."""
    return locale.strip().replace("_", "-").lower()


def primary_subtag(locale: str) -> str:
    return normalize_locale(locale).split("-", 1)[0]


def _name_has(voice: Voice, hints: Iterable[str]) -> bool:
    name = voice.name.lower()
    return any(hint.lower() in name for hint in hints)


def rank_voices(available: Sequence[Voice], target_locale: str,
                preferences: Optional[VoicePreferences] = None) -> List[Tuple[int, Voice]]:
    """Return ``(rank, voice)`` for every voice matching ``target_locale``.

    Lower rank is better; voices that match nothing are left out. The order
    within one rank follows the platform's list order.
    """
    preferences = preferences or VoicePreferences()
    target = normalize_locale(target_locale)
    language = primary_subtag(target_locale)
    name_hints = preferences.name_hints.get(language, ())

    ranked = []
    for voice in available:
        lang = normalize_locale(voice.lang)
        exact = lang == target
        from_provider = _name_has(voice, preferences.provider_hints)
        if exact and from_provider and _name_has(voice, preferences.style_hints):
            rank = 1
        elif exact and from_provider:
            rank = 2
        elif exact and name_hints and _name_has(voice, name_hints):
            rank = 3
        elif exact:
            rank = 4
        elif primary_subtag(lang) == language:
            rank = 5
        else:
            continue
        ranked.append((rank, voice))

    # sorted() is stable, so ties keep list order
    return sorted(ranked, key=lambda item: item[0])


def select_voice(available: Sequence[Voice], target_locale: str,
                 preferences: Optional[VoicePreferences] = None) -> Optional[Voice]:
    """Pick the preferred voice for ``target_locale``.

    Args:
        available: Voices the platform currently reports (may be empty)
        target_locale: BCP 47 locale such as ``id-ID``
        preferences: Provider, style and name hints

    Returns:
        The best voice, or None to let the platform use its default
    """
    ranked = rank_voices(available, target_locale, preferences)
    if not ranked:
        logger.debug(f"No voice for {target_locale} among {len(available)} voices")
        return None
    rank, voice = ranked[0]
    logger.debug(f"Selected voice '{voice.name}' ({voice.lang}) with rank {rank}")
    return voice
