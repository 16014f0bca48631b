import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from gnsslocutils.linked_list import LinkedListStatus
from gnsslocutils.msg_q import (
    MessageQueue,
    MsgQueueError,
    MsgQueueStatus,
    convert_linked_list_status,
)


@pytest.mark.parametrize(
    "ll_status, expected",
    [
        (LinkedListStatus.SUCCESS, MsgQueueStatus.SUCCESS),
        (LinkedListStatus.FAILURE_GENERAL, MsgQueueStatus.FAILURE_GENERAL),
        (LinkedListStatus.INVALID_PARAMETER, MsgQueueStatus.INVALID_PARAMETER),
        (LinkedListStatus.INVALID_HANDLE, MsgQueueStatus.INVALID_HANDLE),
        (LinkedListStatus.UNAVAILABLE_RESOURCE, MsgQueueStatus.UNAVAILABLE_RESOURCE),
        (LinkedListStatus.INSUFFICIENT_BUFFER, MsgQueueStatus.INSUFFICIENT_BUFFER),
    ],
)
def test_convert_linked_list_status(ll_status, expected):
    assert convert_linked_list_status(ll_status) is expected


def test_convert_unknown_status_is_general_failure():
    assert convert_linked_list_status(-99) is MsgQueueStatus.FAILURE_GENERAL


def test_status_values_fixed_by_header():
    assert convert_linked_list_status(LinkedListStatus.UNAVAILABLE_RESOURCE) == -4
    assert convert_linked_list_status(LinkedListStatus.INSUFFICIENT_BUFFER) == -5


def test_fifo_order():
    q = MessageQueue()
    for msg in ["a", "b", "c"]:
        q.send(msg)
    assert [q.receive() for _ in range(3)] == ["a", "b", "c"]
    assert len(q) == 0


def test_send_none_is_invalid_parameter():
    q = MessageQueue()
    with pytest.raises(MsgQueueError) as info:
        q.send(None)
    assert info.value.status is MsgQueueStatus.INVALID_PARAMETER


def test_receive_waits_for_sender():
    q = MessageQueue()
    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(q.receive)
        time.sleep(0.05)
        assert not future.done()
        q.send("hello")
        assert future.result(timeout=2) == "hello"


def test_unblock_wakes_waiting_receiver():
    q = MessageQueue()
    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(q.receive)
        time.sleep(0.05)
        q.unblock()
        with pytest.raises(MsgQueueError) as info:
            future.result(timeout=2)
    assert info.value.status is MsgQueueStatus.UNAVAILABLE_RESOURCE


def test_operations_after_unblock_fail():
    q = MessageQueue()
    q.unblock()
    for operation in (lambda: q.send("x"), q.receive, q.unblock):
        with pytest.raises(MsgQueueError) as info:
            operation()
        assert info.value.status is MsgQueueStatus.UNAVAILABLE_RESOURCE


def test_flush_calls_dealloc_and_empties():
    q = MessageQueue()
    freed = []
    q.send("one", freed.append)
    q.send("two")
    q.send("three", freed.append)
    q.flush()
    assert len(q) == 0
    assert sorted(freed) == ["one", "three"]


def test_close_flushes_and_invalidates():
    q = MessageQueue()
    freed = []
    q.send("pending", freed.append)
    q.close()
    assert freed == ["pending"]
    with pytest.raises(MsgQueueError) as info:
        q.send("late")
    assert info.value.status is MsgQueueStatus.INVALID_HANDLE


def test_context_manager_closes():
    freed = []
    with MessageQueue() as q:
        q.send("msg", freed.append)
    assert freed == ["msg"]
    with pytest.raises(MsgQueueError) as info:
        q.receive()
    assert info.value.status is MsgQueueStatus.INVALID_HANDLE