"""
Event bus module for LogFollower.

This module provides the observer registry through which a tailer reports
path and pause changes, file size changes, parsed entries, batch ends and
errors to its consumers.
"""

import threading
from typing import Any, Callable, Dict, List, Optional, Union
from dataclasses import dataclass
from datetime import datetime
import logging


# Event types published by the tailer
PATH_CHANGED = 'path_changed'
PAUSED_CHANGED = 'paused_changed'
SIZE_CHANGED = 'size_changed'
NEW_ENTRY = 'new_entry'
BATCH_END = 'batch_end'
ERROR = 'error'

TAILER_EVENTS = (PATH_CHANGED, PAUSED_CHANGED, SIZE_CHANGED, NEW_ENTRY, BATCH_END, ERROR)

# Subscribing to this type receives every published event
ALL_EVENTS = '*'


@dataclass
class Event:
    """
    Envelope for a published event.
    """
    type: str
    data: Any = None
    timestamp: datetime = None
    source: str = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()


class EventBus:
    """
    Synchronous publish/subscribe registry.

    Handlers run on the publishing thread, in subscription order, outside
    the registry lock.
    """

    def __init__(self):
        """Initialize the event bus."""
        self._handlers: Dict[str, List[Callable[[Event], None]]] = {}
        self._lock = threading.RLock()
        self.logger = logging.getLogger(__name__)

    def subscribe(self, event_type: str, handler: Callable[[Event], None]):
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to subscribe to, or ``'*'`` for all events
            handler: Function to call with the Event when it is published
        """
        with self._lock:
            if event_type not in self._handlers:
                self._handlers[event_type] = []
            self._handlers[event_type].append(handler)
            self.logger.debug(f"Subscribed to event type: {event_type}")

    def unsubscribe(self, event_type: str, handler: Callable[[Event], None]):
        """
        Unsubscribe from an event type.

        Args:
            event_type: Type of event to unsubscribe from
            handler: Handler function to remove
        """
        with self._lock:
            if event_type in self._handlers:
                try:
                    self._handlers[event_type].remove(handler)
                    self.logger.debug(f"Unsubscribed from event type: {event_type}")
                except ValueError:
                    pass # Handler was not subscribed

    def publish(self, event: Union[Event, str], data: Any = None, source: Optional[str] = None):
        """
        Publish an event to all subscribed handlers.

        Args:
            event: Event object or event type string
            data: Data to include with the event (if event is a string)
            source: Source identifier for the event
        """
        if isinstance(event, str):
            event = Event(type=event, data=data, source=source)

        with self._lock:
            handlers = list(self._handlers.get(event.type, []))
            handlers.extend(self._handlers.get(ALL_EVENTS, []))

        # Execute handlers outside the lock so they may subscribe or publish
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self.logger.error(f"Error in event handler for {event.type}: {str(e)}")

    def clear_subscribers(self, event_type: Optional[str] = None):
        """
        Clear subscribers for a specific event type or all types.

        Args:
            event_type: Event type to clear, or None to clear all
        """
        with self._lock:
            if event_type:
                self._handlers.pop(event_type, None)
                self.logger.debug(f"Cleared subscribers for event type: {event_type}")
            else:
                self._handlers.clear()
                self.logger.debug("Cleared all subscribers")
