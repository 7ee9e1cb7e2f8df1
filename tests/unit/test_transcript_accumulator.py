"""Unit tests for TranscriptAccumulator."""

import pytest

from bicarabaca.dictation.accumulator import TranscriptAccumulator
from bicarabaca.models.transcription import RecognitionResultBatch, Transcript


def batch(*entries):
    return RecognitionResultBatch.of(*entries)


@pytest.mark.unit
class TestTranscriptAccumulator:
    """Test cases for TranscriptAccumulator."""

    def test_initial_state_is_empty(self):
        acc = TranscriptAccumulator()

        assert acc.transcript == Transcript("", "")
        assert acc.epoch == 0
        assert acc.confirmed_in_epoch == 0

    def test_interim_only_batch_sets_provisional(self):
        acc = TranscriptAccumulator()

        result = acc.apply(batch(("halo", False)), epoch=0)

        assert result.confirmed == ""
        assert result.provisional == "halo"
        assert result.text == "halo"

    def test_final_text_is_confirmed_with_trailing_space(self):
        acc = TranscriptAccumulator()

        result = acc.apply(batch(("halo semua", True)), epoch=0)

        assert result.confirmed == "halo semua "
        assert result.provisional == ""

    def test_redelivering_same_batch_is_idempotent(self):
        acc = TranscriptAccumulator()
        same = batch(("hari ini", True), (" aku bermain", False))

        first = acc.apply(same, epoch=0)
        second = acc.apply(same, epoch=0)

        assert first == second
        assert second.confirmed == "hari ini "
        assert second.provisional == " aku bermain"

    def test_cumulative_batches_append_only_new_final_text(self):
        acc = TranscriptAccumulator()

        acc.apply(batch(("hari ini", True)), epoch=0)
        acc.apply(batch(("hari ini", True), (" aku", False)), epoch=0)
        result = acc.apply(batch(("hari ini", True), (" aku bermain bola", True)), epoch=0)

        assert result.confirmed == "hari ini aku bermain bola "
        assert result.provisional == ""
        assert acc.confirmed_in_epoch == len("hari ini aku bermain bola")

    def test_confirmed_grows_monotonically_within_epoch(self):
        acc = TranscriptAccumulator()
        deliveries = [
            batch(("satu", False)),
            batch(("satu", True)),
            batch(("satu", True), (" dua", False)),
            batch(("satu", True), (" dua", True)),
            batch(("satu", True), (" dua", True), (" tiga", True)),
        ]

        previous = ""
        for delivery in deliveries:
            confirmed = acc.apply(delivery, epoch=0).confirmed
            assert confirmed.startswith(previous)
            previous = confirmed

        assert previous == "satu dua tiga "

    def test_shorter_final_text_appends_nothing(self):
        acc = TranscriptAccumulator()
        acc.apply(batch(("satu dua", True)), epoch=0)

        result = acc.apply(batch(("satu", True)), epoch=0)

        assert result.confirmed == "satu dua "

    def test_epoch_change_does_not_lose_or_duplicate_text(self):
        acc = TranscriptAccumulator()

        first = acc.apply(batch(("hello ", True)), epoch=0)
        assert first.confirmed == "hello "

        second = acc.apply(batch(("world", True)), epoch=1)
        assert second.confirmed == "hello world "

    def test_epoch_change_resets_counter_not_confirmed(self):
        acc = TranscriptAccumulator()
        acc.apply(batch(("kalimat yang cukup panjang", True)), epoch=0)

        # Shorter than what epoch 0 confirmed, still new speech in epoch 1
        result = acc.apply(batch(("lagi", True)), epoch=1)

        assert result.confirmed == "kalimat yang cukup panjang lagi "
        assert acc.epoch == 1
        assert acc.confirmed_in_epoch == len("lagi")

    def test_provisional_is_replaced_not_appended(self):
        acc = TranscriptAccumulator()

        acc.apply(batch(("a", False)), epoch=0)
        result = acc.apply(batch(("ab", False)), epoch=0)

        assert result.provisional == "ab"

    def test_multiple_interim_entries_are_concatenated_in_order(self):
        acc = TranscriptAccumulator()

        result = acc.apply(batch(("satu", True), (" dua", False), (" tiga", False)), epoch=0)

        assert result.provisional == " dua tiga"

    def test_seed_prepends_existing_text_with_separator(self):
        acc = TranscriptAccumulator(seed="  teks lama  ")

        result = acc.apply(batch(("baru", True)), epoch=0)

        assert result.confirmed == "teks lama baru "

    def test_reset_clears_everything(self):
        acc = TranscriptAccumulator()
        acc.apply(batch(("satu", True), (" dua", False)), epoch=3)

        acc.reset()

        assert acc.transcript == Transcript("", "")
        assert acc.epoch == 0
        assert acc.confirmed_in_epoch == 0

    def test_whitespace_only_final_text_adds_nothing(self):
        acc = TranscriptAccumulator()

        result = acc.apply(batch(("   ", True)), epoch=0)

        assert result.confirmed == ""


@pytest.mark.unit
class TestFinalText:
    """Text kept when dictation stops."""

    def test_provisional_only_is_kept_for_display(self):
        assert Transcript(confirmed="", provisional="testing").final_text() == "testing"

    def test_confirmed_text_wins_over_provisional(self):
        assert Transcript(confirmed="halo ", provisional="dun").final_text() == "halo"

    def test_final_text_does_not_touch_epoch_counter(self):
        acc = TranscriptAccumulator()
        acc.apply(batch(("testing", False)), epoch=0)

        assert acc.final_text() == "testing"
        assert acc.confirmed == ""
        assert acc.confirmed_in_epoch == 0

    def test_freeze_drops_provisional_only_behind_confirmed_text(self):
        acc = TranscriptAccumulator()
        acc.apply(batch(("halo", True), (" dun", False)), epoch=0)

        assert acc.freeze() == "halo"
        assert acc.transcript == Transcript("halo ", "")

        only_provisional = TranscriptAccumulator()
        only_provisional.apply(batch(("testing", False)), epoch=0)

        assert only_provisional.freeze() == "testing"
        assert only_provisional.transcript == Transcript("", "testing")
