"""One-shot timers that call back on expiry unless stopped first."""

from __future__ import annotations

import enum
import errno
import threading
from typing import Any, Callable, Optional

from gnsslocutils.log_util import LogLevel, loc_logger

TimerCallback = Callable[[Any, int], None]


class TimerState(enum.IntEnum):
    """Life-cycle state of a timer."""

    READY = 100
    WAITING = 101
    DONE = 102
    ABORT = 103


class LocTimer:
    """A timer running on its own daemon thread.

    When ``msec`` milliseconds pass without :meth:`stop`, ``callback`` is
    called with ``(user_data, errno.ETIMEDOUT)``. ``result`` ends up as
    ``errno.ETIMEDOUT`` on expiry, 0 when stopped while waiting and
    ``-errno.ETIMEDOUT`` when stopped before the wait began.
    """

    def __init__(self, msec: int, callback: TimerCallback, user_data: Any = None) -> None:
        if callback is None or msec <= 0:
            loc_logger.log(LogLevel.ERROR, "loc_timer_start: Error: Wrong parameters")
            raise ValueError("callback is required and msec must be positive")
        self.msec = msec
        self.callback = callback
        self.user_data = user_data
        self.state = TimerState.READY
        self.result: Optional[int] = None
        self._cond = threading.Condition()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        loc_logger.log(LogLevel.DEBUG, f"loc_timer_start: Created thread {self._thread.name}")

    def _run(self) -> None:
        ret = -errno.ETIMEDOUT
        loc_logger.log(LogLevel.DEBUG, f"timer_thread: Enter. Delay = {self.msec}")
        with self._cond:
            if self.state is TimerState.READY:
                self.state = TimerState.WAITING
                stopped = self._cond.wait_for(
                    lambda: self.state is TimerState.ABORT, self.msec / 1000.0
                )
                ret = 0 if stopped else errno.ETIMEDOUT
                self.state = TimerState.DONE
        self.result = ret
        if ret == errno.ETIMEDOUT:
            loc_logger.log(LogLevel.VERBOSE, "timer_thread: loc_timer timed out")
            self.callback(self.user_data, ret)
        elif ret == 0:
            loc_logger.log(LogLevel.VERBOSE, "timer_thread: loc_timer stopped")
        else:
            loc_logger.log(LogLevel.VERBOSE, "timer_thread: loc_timer cancelled")

    def stop(self) -> None:
        """Cancel the timer if it has not fired yet."""
        with self._cond:
            if self.state in (TimerState.READY, TimerState.WAITING):
                self.state = TimerState.ABORT
                self._cond.notify()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the timer thread to end; return True if it has."""
        self._thread.join(timeout)
        return not self._thread.is_alive()


def loc_timer_start(msec: int, callback: TimerCallback, user_data: Any = None) -> LocTimer:
    """Start a timer of ``msec`` milliseconds and return it."""
    return LocTimer(msec, callback, user_data)