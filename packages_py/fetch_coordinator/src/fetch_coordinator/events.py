"""
Publish/subscribe channel for coordinator events.
"""
import logging
from typing import Any, Callable, Dict, List

from .types import EventHandler

logger = logging.getLogger("fetch_coordinator.events")

ERROR_EVENT = "error"


class ErrorEventBus:
    """
    Ordered observer registry.

    Handlers run synchronously in registration order. An exception raised by
    one handler is logged and does not stop delivery to the next one.

    Example:
        bus = ErrorEventBus()
        unsubscribe = bus.on("error", lambda err: print(err.status))
        bus.emit("error", error)
        unsubscribe()
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = {}

    def on(self, name: str, handler: EventHandler) -> Callable[[], None]:
        """Register handler for name. Returns a callable that removes it."""
        self._handlers.setdefault(name, []).append(handler)
        return lambda: self.off(name, handler)

    def off(self, name: str, handler: EventHandler) -> None:
        """Remove the first registration of handler for name."""
        handlers = self._handlers.get(name)
        if not handlers:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            return
        if not handlers:
            del self._handlers[name]

    def emit(self, name: str, payload: Any = None) -> None:
        """Deliver payload to every handler registered for name."""
        # snapshot so handlers may unsubscribe while being dispatched
        for handler in list(self._handlers.get(name, ())):
            try:
                handler(payload)
            except Exception:
                logger.exception(f"ErrorEventBus: handler {handler!r} failed for event {name!r}")

    def listener_count(self, name: str) -> int:
        """Number of handlers registered for name."""
        return len(self._handlers.get(name, ()))

    def clear(self) -> None:
        """Remove every handler."""
        self._handlers.clear()
