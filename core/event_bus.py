"""
In-Process Event Bus

Event envelope and a local publish/subscribe bus used by services that run
inside one process. Subscribers register a subject pattern and receive every
published Event whose type matches it.
"""

import asyncio
import fnmatch
import inspect
import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class Event:
    """Event model"""

    def __init__(
        self,
        event_type: Union[Enum, str],
        source: Union[Enum, str],
        data: Dict[str, Any],
        subject: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ):
        self.id = str(uuid.uuid4())
        self.type = event_type.value if isinstance(event_type, Enum) else event_type
        self.source = source.value if isinstance(source, Enum) else source
        self.data = data
        self.subject = subject
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.metadata = metadata or {}
        self.version = "1.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "source": self.source,
            "subject": self.subject,
            "timestamp": self.timestamp,
            "data": self.data,
            "metadata": self.metadata,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        event = cls.__new__(cls)
        event.id = data.get("id")
        event.type = data.get("type")
        event.source = data.get("source")
        event.subject = data.get("subject")
        event.timestamp = data.get("timestamp")
        event.data = data.get("data", {})
        event.metadata = data.get("metadata", {})
        event.version = data.get("version", "1.0.0")
        return event


class LocalEventBus:
    """
    In-process event bus.

    Handlers run in the publisher's task, in subscription order. A failing
    handler is logged and does not stop delivery to the others or fail the
    publisher.
    """

    def __init__(self, service_name: str):
        self.service_name = service_name
        self._subscriptions: Dict[str, List[Callable]] = {}
        self._is_connected = False

    async def connect(self):
        self._is_connected = True
        logger.info(f"Local event bus ready for {self.service_name}")

    async def publish_event(self, event: Event) -> bool:
        """Deliver an event to every matching subscriber"""
        if not self._is_connected:
            logger.error("Event bus is closed")
            return False

        for pattern, handlers in list(self._subscriptions.items()):
            if not self._matches(pattern, event.type):
                continue
            for handler in list(handlers):
                try:
                    result = handler(event)
                    if inspect.isawaitable(result):
                        await result
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.error(f"Handler for {pattern} failed on event {event.type} [{event.id}]: {e}")

        logger.debug(f"Published event {event.type} [{event.id}]")
        return True

    async def subscribe_to_events(self, pattern: str, handler: Callable) -> str:
        """
        Subscribe a handler to events matching a pattern.

        Args:
            pattern: Event type or fnmatch pattern (e.g. "inventory:*")
            handler: Sync or async callable receiving the Event
        """
        self._subscriptions.setdefault(pattern, []).append(handler)
        logger.info(f"Subscribed to {pattern}")
        return pattern

    async def unsubscribe(self, pattern: str) -> bool:
        """Remove all handlers for a pattern"""
        if self._subscriptions.pop(pattern, None) is not None:
            logger.info(f"Unsubscribed from {pattern}")
            return True
        return False

    async def close(self):
        self._subscriptions.clear()
        self._is_connected = False
        logger.info(f"Local event bus closed for {self.service_name}")

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    @staticmethod
    def _matches(pattern: str, event_type: str) -> bool:
        return pattern == event_type or fnmatch.fnmatchcase(event_type, pattern)


async def get_event_bus(service_name: str) -> LocalEventBus:
    """
    Create a connected event bus for a service.

    Each call returns a new bus so that service instances (and tests) do not
    share subscribers.
    """
    event_bus = LocalEventBus(service_name)
    await event_bus.connect()
    return event_bus


__all__ = ["Event", "LocalEventBus", "get_event_bus"]
