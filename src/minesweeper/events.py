"""
Terminal game events.

The channel holds a single slot: the first published event is kept
and every later one is dropped.
"""
import logging
import threading
from enum import Enum, auto
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)


class Event(Enum):
    """Terminal outcome of a game."""

    WIN = auto()
    LOSE = auto()


class EventChannel:
    """
    Single-slot mailbox delivering the terminal event of one game.

    Listeners may block on wait(), poll without blocking, or register
    a callback with subscribe().
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._event: Optional[Event] = None
        self._listeners: List[Callable[[Event], None]] = []

    def publish(self, event: Event) -> bool:
        """
        Resolve the channel with event.

        Returns:
            True if event was stored, False if the channel already
            holds a terminal event.
        """
        with self._condition:
            if self._event is not None:
                return False
            self._event = event
            listeners = list(self._listeners)
            self._listeners.clear()
            self._condition.notify_all()

        logger.info("Game ended: %s", event.name)
        for listener in listeners:
            self._notify(listener, event)
        return True

    def _notify(self, listener: Callable[[Event], None], event: Event) -> None:
        """Call one listener, logging its failure so the rest still run."""
        try:
            listener(event)
        except Exception:
            logger.exception("Event listener %r failed", listener)

    def wait(self, timeout: Optional[float] = None) -> Optional[Event]:
        """
        Block until an event is published.

        Args:
            timeout: Seconds to wait, or None to wait forever.

        Returns:
            The terminal event, or None if the timeout expired.
        """
        with self._condition:
            self._condition.wait_for(lambda: self._event is not None, timeout)
            return self._event

    def poll(self) -> Optional[Event]:
        """Get the terminal event without blocking."""
        with self._condition:
            return self._event

    @property
    def done(self) -> bool:
        """Check if a terminal event was published."""
        return self.poll() is not None

    def subscribe(self, callback: Callable[[Event], None]) -> None:
        """
        Call callback with the terminal event.

        Runs immediately if the channel is already resolved, otherwise
        on the thread that publishes the event.
        """
        with self._condition:
            if self._event is None:
                self._listeners.append(callback)
                return
            event = self._event
        callback(event)
