"""Continuous dictation engine."""

from .accumulator import TranscriptAccumulator
from .scheduler import Scheduler, ScheduledCall, ThreadingScheduler
from .session import DictationSession
from .monitor import TranscriptMonitor

__all__ = [
    "TranscriptAccumulator",
    "Scheduler",
    "ScheduledCall",
    "ThreadingScheduler",
    "DictationSession",
    "TranscriptMonitor",
]
