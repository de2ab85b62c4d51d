"""
events/dispatcher.py - Synchronous event dispatcher

Events are either string names ('user.created') or objects. Object events
are keyed by their class, so listeners may subscribe with the class itself.
String listeners may use shell-style wildcards ('db.*').

Listener exceptions propagate to the caller of dispatch().
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
import fnmatch
import logging

logger = logging.getLogger("events.dispatcher")

Listener = Callable[..., Any]
EventKey = Union[str, type]


def _event_name(event: EventKey) -> str:
    if isinstance(event, type):
        return f"{event.__module__}.{event.__qualname__}"
    return event


def _is_wildcard(name: str) -> bool:
    return any(ch in name for ch in "*?[")


class Dispatcher:
    """
    Event dispatcher.

    Usage:
        events = Dispatcher()
        events.listen(QueryExecuted, on_query)
        events.listen("cache.*", on_cache_event)

        events.dispatch(QueryExecuted(sql="select 1"))
        events.dispatch("cache.hit", ["users", 3])
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}
        self._wildcards: Dict[str, List[Listener]] = {}
        logger.debug("Dispatcher created")

    def listen(
        self,
        events: Union[EventKey, Sequence[EventKey]],
        listener: Listener,
    ) -> None:
        """
        Register a listener for one or more events.

        Args:
            events: Event name, event class, wildcard pattern, or a list of these
            listener: Callback receiving the event object or the payload arguments
        """
        if isinstance(events, (str, type)):
            events = [events]

        for event in events:
            name = _event_name(event)
            target = self._wildcards if _is_wildcard(name) else self._listeners
            target.setdefault(name, []).append(listener)
            logger.debug(f"Listening on {name}")

    def has_listeners(self, event: EventKey) -> bool:
        """Check whether an event has any listeners, wildcards included."""
        name = _event_name(event)
        if self._listeners.get(name):
            return True
        return any(
            fnmatch.fnmatchcase(name, pattern) and handlers
            for pattern, handlers in self._wildcards.items()
        )

    def get_listeners(self, event: EventKey) -> List[Listener]:
        """Get listeners for an event: direct ones first, then wildcard matches."""
        name = _event_name(event)
        listeners = list(self._listeners.get(name, []))
        for pattern, handlers in self._wildcards.items():
            if fnmatch.fnmatchcase(name, pattern):
                listeners.extend(handlers)
        return listeners

    def dispatch(
        self,
        event: Any,
        payload: Any = None,
        halt: bool = False,
    ) -> Any:
        """
        Fire an event and call its listeners in order.

        A listener returning False stops propagation. With halt=True the
        first non-None response is returned immediately.

        Args:
            event: Event name or event object
            payload: Arguments for string events (a list is spread)
            halt: Stop at the first non-None response

        Returns:
            List of responses, or a single response when halt is set
        """
        if isinstance(event, str):
            name = event
            if payload is None:
                args: List[Any] = []
            elif isinstance(payload, (list, tuple)):
                args = list(payload)
            else:
                args = [payload]
        else:
            name = _event_name(type(event))
            args = [event]

        responses: List[Any] = []
        for listener in self.get_listeners(name):
            response = listener(*args)

            if halt and response is not None:
                return response

            if response is False:
                logger.debug(f"Propagation of {name} stopped by listener")
                break

            responses.append(response)

        return None if halt else responses

    def until(self, event: Any, payload: Any = None) -> Any:
        """Dispatch until the first non-None response."""
        return self.dispatch(event, payload, halt=True)

    def forget(self, event: EventKey) -> None:
        """Remove all listeners for an event name or pattern."""
        name = _event_name(event)
        self._listeners.pop(name, None)
        self._wildcards.pop(name, None)

    def remove_listener(self, event: EventKey, listener: Listener) -> bool:
        """
        Remove one listener from an event name or pattern.

        Returns:
            True if the listener was registered
        """
        name = _event_name(event)
        target = self._wildcards if _is_wildcard(name) else self._listeners
        handlers = target.get(name, [])
        if listener not in handlers:
            return False
        handlers.remove(listener)
        if not handlers:
            target.pop(name, None)
        return True

    def flush_listeners(self) -> None:
        """Remove every listener."""
        self._listeners.clear()
        self._wildcards.clear()
        logger.debug("Cleared all listeners")

    @property
    def listener_count(self) -> int:
        """Get total number of registered listeners."""
        count = sum(len(handlers) for handlers in self._listeners.values())
        count += sum(len(handlers) for handlers in self._wildcards.values())
        return count
