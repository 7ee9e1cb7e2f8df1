"""Delayed-call scheduling used for recognizer restarts."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class ScheduledCall(ABC):
    """Handle to a pending delayed call."""

    @abstractmethod
    def cancel(self) -> None:
        pass


class Scheduler(ABC):
    """Runs callbacks after a delay."""

    @abstractmethod
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        """Schedule ``callback`` to run once after ``delay_seconds``."""
        pass


class _TimerCall(ScheduledCall):
    def __init__(self, timer: threading.Timer):
        self.timer = timer

    def cancel(self) -> None:
        self.timer.cancel()


class ThreadingScheduler(Scheduler):
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        timer = threading.Timer(delay_seconds, self._run, args=(callback,))
        timer.name = "DictationRestartTimer"
        timer.daemon = True
        timer.start()
        return _TimerCall(timer)

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception as e:
            logger.error(f"Unhandled exception in scheduled call: {e}", exc_info=True)
