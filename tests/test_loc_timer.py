import errno
import threading

import pytest

from gnsslocutils.loc_timer import LocTimer, TimerState, loc_timer_start


def test_timer_fires_callback():
    fired = threading.Event()
    calls = []

    def callback(user_data, result):
        calls.append((user_data, result))
        fired.set()

    timer = loc_timer_start(20, callback, "data")
    assert fired.wait(5)
    assert timer.join(5)
    assert calls == [("data", errno.ETIMEDOUT)]
    assert timer.result == errno.ETIMEDOUT
    assert timer.state is TimerState.DONE


def test_stop_prevents_callback():
    calls = []
    timer = loc_timer_start(10_000, lambda data, result: calls.append(result))
    timer.stop()
    assert timer.join(5)
    assert calls == []
    assert timer.result in (0, -errno.ETIMEDOUT)
    assert timer.state in (TimerState.DONE, TimerState.ABORT)


def test_stop_after_fire_is_noop():
    fired = threading.Event()
    timer = loc_timer_start(10, lambda data, result: fired.set())
    assert fired.wait(5)
    assert timer.join(5)
    timer.stop()
    assert timer.state is TimerState.DONE
    assert timer.result == errno.ETIMEDOUT


@pytest.mark.parametrize("msec", [0, -5])
def test_rejects_bad_delay(msec):
    with pytest.raises(ValueError):
        loc_timer_start(msec, lambda data, result: None)


def test_rejects_missing_callback():
    with pytest.raises(ValueError):
        LocTimer(100, None)