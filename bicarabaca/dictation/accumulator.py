"""Reconciles recognition result batches into one growing transcript.

Within one recognition run (an epoch) every batch repeats all earlier entries
plus whatever is new, so the finalized part of a batch only ever grows. The
accumulator remembers how much finalized text of the current epoch it has
already confirmed and appends only the excess. A restart of the recognizer
zeroes its result numbering, so that counter is scoped to the epoch while
the confirmed text itself lives for the whole session.
"""

import logging

from ..models.transcription import RecognitionResultBatch, Transcript

logger = logging.getLogger(__name__)

SEPARATOR = " "


class TranscriptAccumulator:
    """Merges cumulative result batches into confirmed and provisional text."""

    def __init__(self, seed: str = ""):
        self.confirmed = ""
        self.provisional = ""
        self.epoch = 0
        # Length of this epoch's final text already appended to confirmed
        self.confirmed_in_epoch = 0
        if seed:
            self.seed(seed)

    @property
    def transcript(self) -> Transcript:
        return Transcript(confirmed=self.confirmed, provisional=self.provisional)

    def seed(self, text: str) -> None:
        """Start from pre-existing text so new speech is appended to it."""
        text = text.strip()
        self.confirmed = text + SEPARATOR if text else ""
        self.provisional = ""
        self.epoch = 0
        self.confirmed_in_epoch = 0

    def reset(self) -> None:
        """Forget everything, including confirmed text."""
        self.seed("")

    def apply(self, batch: RecognitionResultBatch, epoch: int) -> Transcript:
        """Merge one batch delivered during ``epoch``.

        Args:
            batch: Cumulative results of the recognition run ``epoch``
            epoch: Restart counter the batch belongs to

        Returns:
            The transcript after merging
        """
        if epoch != self.epoch:
            logger.debug(f"Epoch changed {self.epoch} -> {epoch}; "
                         f"resetting per-epoch counter ({self.confirmed_in_epoch} chars)")
            self.epoch = epoch
            self.confirmed_in_epoch = 0

        batch_final_text = batch.final_text()
        self.provisional = batch.provisional_text()

        if len(batch_final_text) > self.confirmed_in_epoch:
            new_text = batch_final_text[self.confirmed_in_epoch:]
            self.confirmed_in_epoch = len(batch_final_text)
            self._append(new_text)
        elif batch_final_text:
            logger.debug("Batch carries no new final text")

        return self.transcript

    def _append(self, new_text: str) -> None:
        piece = new_text.strip()
        if not piece:
            return
        if self.confirmed and not self.confirmed[-1].isspace():
            self.confirmed += SEPARATOR
        self.confirmed += piece + SEPARATOR
        logger.debug(f"Confirmed: '{piece}' (total: {len(self.confirmed)} chars)")

    def final_text(self) -> str:
        """Text to keep once dictation stops. See ``Transcript.final_text``."""
        return self.transcript.final_text()

    def freeze(self) -> str:
        """Settle the transcript when dictation stops.

        Drops a provisional tail that lost to confirmed text, so the
        transcript agrees with the returned final text.

        Returns:
            The final text, as ``final_text``
        """
        text = self.final_text()
        if self.confirmed.strip():
            self.provisional = ""
        return text
