"""Unit tests for TranscriptMonitor."""

import io

import pytest
from rich.console import Console

from bicarabaca.dictation.monitor import TranscriptMonitor
from bicarabaca.errors import PermissionDenied
from bicarabaca.models.events import SessionEvent, TranscriptEvent
from bicarabaca.models.session import SessionState


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def monitor(topic_prefix, output):
    mon = TranscriptMonitor(topic_prefix, console=Console(file=output, width=100))
    yield mon
    mon.shutdown()


def transcript_event(text, is_final=False):
    return TranscriptEvent(session_id="abc", text=text, confirmed=text, provisional="",
                           epoch=0, is_final=is_final)


@pytest.mark.unit
class TestTranscriptMonitor:
    """Test cases for TranscriptMonitor."""

    def test_collects_notifications(self, monitor, notifier, output):
        notifier.publish_status("🔴 Recording... speak now!")
        notifier.publish_transcript(transcript_event("halo "))
        notifier.publish_transcript(transcript_event("halo", is_final=True))
        notifier.publish_session(SessionEvent("abc", SessionState.RESTARTING, SessionState.LISTENING))

        summary = monitor.get_summary()

        assert summary == {"status_count": 1, "final_count": 1, "restarts": 1, "text": "halo"}
        assert "Recording" in output.getvalue()
        assert "halo" in output.getvalue()

    def test_prints_errors(self, monitor, notifier, output):
        error = PermissionDenied()

        notifier.publish_session(SessionEvent("abc", SessionState.STOPPED,
                                              SessionState.REQUESTING_PERMISSION, error=error))

        assert "Microphone permission was denied" in output.getvalue()

    def test_shutdown_unsubscribes_and_prints_summary(self, topic_prefix, notifier, output):
        mon = TranscriptMonitor(topic_prefix, console=Console(file=output, width=100))
        notifier.publish_transcript(transcript_event("selesai", is_final=True))

        mon.shutdown()
        notifier.publish_status("after shutdown")

        assert mon.get_summary()["status_count"] == 0
        assert "DICTATION SUMMARY" in output.getvalue()
