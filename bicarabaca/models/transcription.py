"""Recognition result and transcript data models."""

from dataclasses import dataclass
from typing import Optional, Tuple, Iterable


@dataclass(frozen=True)
class RecognitionResult:
    """A single entry delivered by the recognition port."""
    text: str
    is_final: bool = False
    confidence: Optional[float] = None


@dataclass(frozen=True)
class RecognitionResultBatch:
    """One delivery of recognition results.

    Deliveries are cumulative within one recognition run: every batch repeats
    the earlier entries of that run plus whatever is new. ``result_index`` is
    the lowest index the port reports as changed; it restarts at 0 whenever
    the port is restarted.
    """
    results: Tuple[RecognitionResult, ...] = ()
    result_index: int = 0

    @classmethod
    def of(cls, *entries: Tuple[str, bool], result_index: int = 0) -> "RecognitionResultBatch":
        """Build a batch from ``(text, is_final)`` pairs."""
        return cls(
            results=tuple(RecognitionResult(text=text, is_final=is_final) for text, is_final in entries),
            result_index=result_index,
        )

    def final_text(self) -> str:
        return "".join(r.text for r in self.results if r.is_final)

    def provisional_text(self) -> str:
        return "".join(r.text for r in self.results if not r.is_final)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterable[RecognitionResult]:
        return iter(self.results)


@dataclass(frozen=True)
class Transcript:
    """Live dictation text split into its finalized and revisable parts."""
    confirmed: str = ""
    provisional: str = ""

    @property
    def text(self) -> str:
        """Text as displayed to the user."""
        return self.confirmed + self.provisional

    def final_text(self) -> str:
        """Text kept once the session stops.

        Finalized speech wins when there is any; a half-spoken utterance is
        only shown when nothing was finalized at all.
        """
        return self.confirmed.strip() or (self.confirmed + self.provisional).strip()
