"""In-process fan-out of run events to presentation subscribers."""

import logging
from typing import Callable, List

from ..models import RunEvent

logger = logging.getLogger(__name__)

Listener = Callable[[RunEvent], None]


class EventHub:
    """
    Delivers every RunEvent to the registered listeners, in registration order.

    Listeners are pure observers: an exception raised by one is logged and the
    remaining listeners still receive the event.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Callable that removes the listener again (idempotent)
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, event: RunEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.error(f"Run event listener {listener!r} failed on {event.kind} event", exc_info=True)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
