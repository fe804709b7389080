"""A first-in, first-out queue of events."""

from __future__ import annotations

from collections import deque
from typing import Callable, Generic, Iterable, Iterator, Optional, TypeVar, Union

T = TypeVar("T")


class EventQueue(Generic[T]):
    """FIFO queue of events with membership tests."""

    def __init__(self, events: Optional[Iterable[T]] = None) -> None:
        self._queue: deque[T] = deque(events or ())

    def push(self, event: T) -> None:
        """Append an event at the back of the queue."""
        self._queue.append(event)

    def front(self) -> T:
        """Return the oldest event without removing it.

        Raises IndexError if the queue is empty.
        """
        if not self._queue:
            raise IndexError("front of an empty event queue")
        return self._queue[0]

    def pop(self) -> T:
        """Remove and return the oldest event.

        Raises IndexError if the queue is empty.
        """
        if not self._queue:
            raise IndexError("pop from an empty event queue")
        return self._queue.popleft()

    def empty(self) -> bool:
        """Whether the queue holds no events."""
        return not self._queue

    def is_queued(self, event_or_predicate: Union[T, Callable[[T], bool]]) -> bool:
        """Whether an equal event, or one matching a predicate, is queued."""
        if callable(event_or_predicate):
            return any(event_or_predicate(event) for event in self._queue)
        return event_or_predicate in self._queue

    def clear(self) -> None:
        """Drop every queued event."""
        self._queue.clear()

    def __copy__(self) -> "EventQueue[T]":
        return EventQueue(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[T]:
        return iter(self._queue)