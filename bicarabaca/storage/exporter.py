"""Save-to-file for typed and dictated text."""

import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, List

from ..errors import EmptyInput, ExportFailed

logger = logging.getLogger(__name__)

KIND_TYPED_TEXT = "teks-saya"
KIND_DICTATED_TEXT = "rekaman-saya"


class TextExporter:
    """Writes text buffers as UTF-8 plain text files named ``<kind>-<date>.txt``."""

    def __init__(self, export_dir: str = "./exports", encoding: str = "utf-8"):
        """Initialize text exporter.

        Args:
            export_dir: Directory the files are written to (created on demand)
            encoding: Text encoding of the written files
        """
        self.export_dir = Path(export_dir)
        self.encoding = encoding
        logger.info(f"TextExporter initialized with export_dir: {self.export_dir}")

    def build_filename(self, kind: str, on: Optional[date] = None) -> str:
        """``<kind>-<YYYY-MM-DD>.txt``, dated in UTC by default."""
        on = on or datetime.now(timezone.utc).date()
        return f"{kind}-{on.isoformat()}.txt"

    def _available_path(self, filename: str) -> Path:
        """Path for ``filename`` that does not clobber an earlier export."""
        path = self.export_dir / filename
        counter = 1
        while path.exists():
            path = self.export_dir / f"{Path(filename).stem} ({counter}){Path(filename).suffix}"
            counter += 1
        return path

    def export(self, text: str, kind: str = KIND_TYPED_TEXT, on: Optional[date] = None) -> Path:
        """Save text to a new file.

        Args:
            text: Text buffer to save (surrounding whitespace is dropped)
            kind: Filename prefix, e.g. ``teks-saya`` or ``rekaman-saya``
            on: Date used in the filename (today in UTC by default)

        Returns:
            Path of the written file

        Raises:
            EmptyInput: Nothing to save
            ExportFailed: The file could not be written
        """
        text = (text or "").strip()
        if not text:
            raise EmptyInput("No text to save")

        try:
            data = text.encode(self.encoding)
            self.export_dir.mkdir(parents=True, exist_ok=True)
            path = self._available_path(self.build_filename(kind, on))
            with open(path, 'xb') as f:
                f.write(data)
        except (OSError, UnicodeError) as e:
            logger.error(f"Error saving text file: {e}")
            raise ExportFailed(f"Failed to save file: {e}") from e

        logger.info(f"Text saved: {path} ({len(text)} chars)")
        return path

    def list_exports(self, kind: Optional[str] = None) -> List[Path]:
        """List exported files, optionally only those of one kind."""
        if not self.export_dir.exists():
            return []
        pattern = f"{kind}-*.txt" if kind else "*.txt"
        return sorted(self.export_dir.glob(pattern))
