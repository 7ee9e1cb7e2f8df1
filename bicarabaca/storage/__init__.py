"""Text export for BicaraBaca."""

from .exporter import TextExporter, KIND_TYPED_TEXT, KIND_DICTATED_TEXT

__all__ = [
    "TextExporter",
    "KIND_TYPED_TEXT",
    "KIND_DICTATED_TEXT",
]
