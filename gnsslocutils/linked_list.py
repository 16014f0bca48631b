"""Doubly-ended list that is filled at the head and drained from the tail."""

from __future__ import annotations

import enum
from collections import deque
from typing import Any, Callable, Iterator, Optional

Dealloc = Callable[[Any], None]


class LinkedListStatus(enum.IntEnum):
    """Result codes of list operations."""

    SUCCESS = 0
    FAILURE_GENERAL = -1
    INVALID_PARAMETER = -2
    INVALID_HANDLE = -3
    UNAVAILABLE_RESOURCE = -4
    INSUFFICIENT_BUFFER = -5


class LinkedListError(Exception):
    """Raised when a list operation fails; carries the failing status."""

    def __init__(self, status: LinkedListStatus, message: str = "") -> None:
        super().__init__(message or status.name)
        self.status = status


class LinkedList:
    """A list where ``add`` pushes at the head and ``remove`` pops the tail.

    Together the two give first-in, first-out order. Each element may carry a
    ``dealloc`` callable that ``flush`` invokes on its data.
    """

    def __init__(self) -> None:
        # Left end is the head, right end is the tail.
        self._items: deque[tuple[Any, Optional[Dealloc]]] = deque()

    def add(self, data: Any, dealloc: Optional[Dealloc] = None) -> None:
        """Add ``data`` at the head of the list."""
        if data is None:
            raise LinkedListError(
                LinkedListStatus.INVALID_PARAMETER, "data must not be None"
            )
        self._items.appendleft((data, dealloc))

    def remove(self) -> Any:
        """Remove and return the data at the tail of the list."""
        if not self._items:
            raise LinkedListError(
                LinkedListStatus.UNAVAILABLE_RESOURCE, "list is empty"
            )
        data, _ = self._items.pop()
        return data

    def empty(self) -> bool:
        """Return True when the list holds no elements."""
        return not self._items

    def flush(self) -> None:
        """Drop every element, from head to tail, calling its dealloc."""
        while self._items:
            data, dealloc = self._items.popleft()
            if dealloc is not None:
                dealloc(data)

    def search(
        self,
        equal: Callable[[Any, Any], bool],
        data_0: Any,
        remove_if_found: bool = False,
        copy_out: bool = True,
    ) -> Any:
        """Find the first element, from the head, for which ``equal(data_0, data)``.

        Returns the matching data when ``copy_out`` is true, else None. With
        ``remove_if_found`` the match is unlinked; if it is not copied out its
        dealloc is called.
        """
        if equal is None:
            raise LinkedListError(
                LinkedListStatus.INVALID_HANDLE, "equal function is required"
            )
        if not self._items:
            raise LinkedListError(
                LinkedListStatus.UNAVAILABLE_RESOURCE, "list is empty"
            )
        for index, (data, dealloc) in enumerate(self._items):
            if equal(data_0, data):
                if remove_if_found:
                    del self._items[index]
                    if not copy_out and dealloc is not None:
                        dealloc(data)
                return data if copy_out else None
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        """Iterate over the data from head to tail."""
        return (data for data, _ in self._items)