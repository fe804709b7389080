"""Observer notification and multicast delegates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional


class Observer(ABC):
    """Receives events broadcast by a :class:`Subject`."""

    @abstractmethod
    def notify(self, event: Hashable, value: Any) -> None:
        """Handle an event broadcast with an associated value."""


class Subject:
    """Broadcasts events to its observers, most recently added first."""

    def __init__(self) -> None:
        self._observers: list[Observer] = []

    def add_observer(self, observer: Observer) -> None:
        """Register an observer; it is notified before those added earlier."""
        self._observers.insert(0, observer)

    def remove_observer(self, observer: Observer) -> None:
        """Unregister an observer.

        Raises ValueError if the observer is not registered.
        """
        for index, current in enumerate(self._observers):
            if current is observer:
                del self._observers[index]
                return
        raise ValueError("observer is not registered with this subject")

    def broadcast(self, event: Hashable, value: Any = False) -> None:
        """Notify every observer of ``event`` with ``value``."""
        for observer in tuple(self._observers):
            observer.notify(event, value)

    def __len__(self) -> int:
        return len(self._observers)


@dataclass
class DelegateInfo:
    """A bound callable and the object it was bound for, if any."""

    delegate: Callable[..., Any]
    binder: Optional[object] = None


class Dispatcher:
    """Invokes the delegates of the pool it has been attached to."""

    def __init__(self) -> None:
        self._pool: Optional[list[DelegateInfo]] = None

    def set_delegates_pool(self, delegates: list[DelegateInfo]) -> None:
        """Attach the list of delegates this dispatcher broadcasts to."""
        self._pool = delegates

    def broadcast(self, *args: Any) -> None:
        """Call every delegate of the pool with ``args``."""
        if self._pool is None:
            return
        for info in tuple(self._pool):
            info.delegate(*args)


class MulticastDelegate:
    """Public binding side of a dispatcher: callers bind, the owner broadcasts."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher
        self._delegates: list[DelegateInfo] = []
        dispatcher.set_delegates_pool(self._delegates)

    def bind(self, delegate: Callable[..., Any], binder: Optional[object] = None) -> None:
        """Bind a callable, optionally recorded against ``binder`` for later unbinding."""
        if not callable(delegate):
            raise TypeError("delegate must be callable")
        self._delegates.append(DelegateInfo(delegate=delegate, binder=binder))

    def unbind(self, delegate: Callable[..., Any]) -> None:
        """Remove every binding of ``delegate``."""
        self._delegates[:] = [info for info in self._delegates if info.delegate != delegate]

    def unbind_binder(self, binder: object) -> None:
        """Remove every binding recorded against ``binder``."""
        self._delegates[:] = [info for info in self._delegates if info.binder is not binder]

    def empty(self) -> bool:
        """Whether no delegate is bound."""
        return not self._delegates

    def __len__(self) -> int:
        return len(self._delegates)