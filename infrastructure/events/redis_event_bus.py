import json
import logging
import threading
from typing import Callable, Dict, List, Optional

import redis
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

from .event_bus_interface import EventBus, build_envelope
from .memory_event_bus import InMemoryEventBus


logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_PREFIX = "tradepost.events."


class RedisEventBus(EventBus):
    """
    Redis pub/sub event bus.

    Each event type maps to its own channel. Publishing never raises: a broken
    connection only loses the event, the caller's transaction is unaffected.
    """

    def __init__(self, redis_url: str = None, channel_prefix: str = None):
        infra = getattr(settings, "INFRASTRUCTURE", {})
        self.redis_url = redis_url or getattr(settings, "REDIS_URL", "redis://localhost:6379/0")
        self.channel_prefix = channel_prefix or infra.get("EVENT_CHANNEL_PREFIX", DEFAULT_CHANNEL_PREFIX)

        try:
            self.redis_client = redis.from_url(self.redis_url)
        except (redis.RedisError, ValueError) as e:
            logger.error(f"Invalid Redis configuration {self.redis_url}: {e}")
            self.redis_client = None

        self._subscribers: Dict[str, List[Callable]] = {}
        self._listener: Optional[threading.Thread] = None

    def channel_for(self, event_type: str) -> str:
        return f"{self.channel_prefix}{event_type}"

    def publish(self, event_type: str, payload: dict):
        if self.redis_client is None:
            logger.warning(f"No Redis client, dropping {event_type}")
            return

        try:
            body = json.dumps(build_envelope(event_type, payload), cls=DjangoJSONEncoder)
            receivers = self.redis_client.publish(self.channel_for(event_type), body)
            logger.info(f"Published {event_type} to {receivers} subscriber(s)")
        except Exception as e:
            logger.error(f"Failed to publish {event_type}: {e}")

    def subscribe(self, event_type: str, handler: Callable):
        self._subscribers.setdefault(event_type, []).append(handler)
        logger.info(f"Registered handler for event: {event_type}")

    def start_listening(self):
        """
        Consume every event channel on a daemon thread.

        The thread listens on the whole prefix pattern, so handlers subscribed
        after it started still receive their events.
        """
        if self.redis_client is None:
            return
        if self._listener is not None and self._listener.is_alive():
            return

        self._listener = threading.Thread(target=self._listen, name="redis-event-bus", daemon=True)
        self._listener.start()

    def _listen(self):
        pattern = self.channel_for("*")
        try:
            pubsub = self.redis_client.pubsub(ignore_subscribe_messages=True)
            pubsub.psubscribe(pattern)
            logger.info(f"Event bus listening on {pattern}")
            for message in pubsub.listen():
                self._handle_message(message)
        except redis.RedisError as e:
            logger.error(f"Event bus listener stopped: {e}")

    def _handle_message(self, message):
        if message.get("type") not in ("message", "pmessage"):
            return

        try:
            envelope = json.loads(message["data"])
            event_type = envelope["event_type"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Discarding malformed event message: {e}")
            return

        for handler in self._subscribers.get(event_type, []):
            try:
                handler(envelope)
            except Exception as e:
                logger.error(f"Handler {getattr(handler, '__name__', handler)} failed on {event_type}: {e}")


_event_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Process-wide bus for the configured ``EVENT_BUS_BACKEND``."""
    global _event_bus_instance
    if _event_bus_instance is None:
        backend = getattr(settings, "INFRASTRUCTURE", {}).get("EVENT_BUS_BACKEND", "redis")
        _event_bus_instance = InMemoryEventBus() if backend == "memory" else RedisEventBus()
    return _event_bus_instance


def reset_event_bus():
    global _event_bus_instance
    _event_bus_instance = None
