"""Thread-safe first-in, first-out message queue built on :class:`LinkedList`."""

from __future__ import annotations

import enum
import threading
from typing import Any, Callable, Optional

from gnsslocutils.linked_list import LinkedList, LinkedListError, LinkedListStatus
from gnsslocutils.log_util import LogLevel, loc_logger

Dealloc = Callable[[Any], None]


class MsgQueueStatus(enum.IntEnum):
    """Result codes of message queue operations."""

    SUCCESS = 0
    FAILURE_GENERAL = -1
    INVALID_PARAMETER = -2
    INVALID_HANDLE = -3
    UNAVAILABLE_RESOURCE = -4
    INSUFFICIENT_BUFFER = -5


class MsgQueueError(Exception):
    """Raised when a queue operation fails; carries the failing status."""

    def __init__(self, status: MsgQueueStatus, message: str = "") -> None:
        super().__init__(message or status.name)
        self.status = status


_STATUS_MAP = {
    LinkedListStatus.SUCCESS: MsgQueueStatus.SUCCESS,
    LinkedListStatus.INVALID_PARAMETER: MsgQueueStatus.INVALID_PARAMETER,
    LinkedListStatus.INVALID_HANDLE: MsgQueueStatus.INVALID_HANDLE,
    LinkedListStatus.UNAVAILABLE_RESOURCE: MsgQueueStatus.UNAVAILABLE_RESOURCE,
    LinkedListStatus.INSUFFICIENT_BUFFER: MsgQueueStatus.INSUFFICIENT_BUFFER,
}


def convert_linked_list_status(status: LinkedListStatus) -> MsgQueueStatus:
    """Map a list status to the matching queue status; unknown ones are general failures."""
    try:
        return _STATUS_MAP[LinkedListStatus(status)]
    except (KeyError, ValueError):
        return MsgQueueStatus.FAILURE_GENERAL


def _from_list_error(exc: LinkedListError) -> MsgQueueError:
    return MsgQueueError(convert_linked_list_status(exc.status), str(exc))


class MessageQueue:
    """A blocking FIFO queue that can be unblocked to release all waiters.

    Once unblocked, the queue refuses further sends and receives until it is
    replaced by a new one. After :meth:`close` every operation fails with
    ``INVALID_HANDLE``.
    """

    def __init__(self) -> None:
        self._list = LinkedList()
        self._cond = threading.Condition()
        self._unblocked = False
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise MsgQueueError(MsgQueueStatus.INVALID_HANDLE, "queue is closed")

    def send(self, msg: Any, dealloc: Optional[Dealloc] = None) -> None:
        """Put ``msg`` on the queue and wake one waiting receiver."""
        self._check_open()
        if msg is None:
            raise MsgQueueError(
                MsgQueueStatus.INVALID_PARAMETER, "message must not be None"
            )
        with self._cond:
            if self._unblocked:
                loc_logger.log(LogLevel.ERROR, "send: message queue has been unblocked")
                raise MsgQueueError(
                    MsgQueueStatus.UNAVAILABLE_RESOURCE, "queue has been unblocked"
                )
            try:
                self._list.add(msg, dealloc)
            except LinkedListError as exc:
                raise _from_list_error(exc) from exc
            finally:
                self._cond.notify()

    def receive(self) -> Any:
        """Return the oldest message, waiting until one arrives or the queue is unblocked."""
        self._check_open()
        with self._cond:
            if self._unblocked:
                loc_logger.log(
                    LogLevel.ERROR, "receive: message queue has been unblocked"
                )
                raise MsgQueueError(
                    MsgQueueStatus.UNAVAILABLE_RESOURCE, "queue has been unblocked"
                )
            while self._list.empty() and not self._unblocked:
                self._cond.wait()
            try:
                return self._list.remove()
            except LinkedListError as exc:
                raise _from_list_error(exc) from exc

    def flush(self) -> None:
        """Drop every queued message, calling each one's dealloc."""
        self._check_open()
        with self._cond:
            try:
                self._list.flush()
            except LinkedListError as exc:
                raise _from_list_error(exc) from exc

    def unblock(self) -> None:
        """Stop the queue and wake every waiting receiver."""
        self._check_open()
        with self._cond:
            if self._unblocked:
                loc_logger.log(
                    LogLevel.ERROR, "unblock: message queue has been unblocked"
                )
                raise MsgQueueError(
                    MsgQueueStatus.UNAVAILABLE_RESOURCE, "queue has been unblocked"
                )
            self._unblocked = True
            self._cond.notify_all()

    def close(self) -> None:
        """Release the queue, flushing pending messages."""
        self._check_open()
        with self._cond:
            self._list.flush()
            self._unblocked = False
            self._closed = True

    def __len__(self) -> int:
        with self._cond:
            return len(self._list)

    def __enter__(self) -> "MessageQueue":
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self._closed:
            self.close()