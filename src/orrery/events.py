"""Minimal named-event dispatch."""

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

__all__ = ["EventDispatcher"]

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventDispatcher:
    """Keeps listeners per event name and calls them in subscription order.

    Parameters
    ----------
    events
        Names of the events that may be subscribed to and dispatched.
    """

    def __init__(self, events: tuple[str, ...]):
        self.events = events
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def _check(self, event: str) -> None:
        if event not in self.events:
            raise ValueError(f"Unknown event {event!r}, expected one of {self.events}")

    def on(self, event: str, listener: Listener) -> None:
        self._check(event)
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        self._check(event)
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def dispatch(self, event: str, **payload: Any) -> None:
        self._check(event)
        for listener in list(self._listeners[event]):
            listener(type=event, **payload)
