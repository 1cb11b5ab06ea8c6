import logging
from typing import Callable, Dict, List

from .event_bus_interface import EventBus, build_envelope


logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """Synchronous in-process event bus used when Redis is not configured."""

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}
        self.published: List[dict] = []

    def publish(self, event_type: str, payload: dict):
        envelope = build_envelope(event_type, payload)
        self.published.append(envelope)

        for handler in self._subscribers.get(event_type, []):
            try:
                handler(envelope)
            except Exception as e:
                logger.error(f"Handler {getattr(handler, '__name__', handler)} failed on {event_type}: {e}")

    def subscribe(self, event_type: str, handler: Callable):
        self._subscribers.setdefault(event_type, []).append(handler)
        logger.debug(f"In-memory handler registered for {event_type}")
