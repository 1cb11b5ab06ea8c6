from abc import ABC, abstractmethod
from typing import Callable

from django.utils import timezone


def build_envelope(event_type: str, payload: dict) -> dict:
    """Wrap a payload the way every handler receives it."""
    return {"event_type": event_type, "occurred_at": timezone.now().isoformat(), "payload": payload}


class EventBus(ABC):
    """
    Fire-and-forget bus for domain events.

    Handlers receive the envelope from ``build_envelope``.
    """

    @abstractmethod
    def publish(self, event_type: str, payload: dict):
        """Deliver to subscribers. Must never raise into business logic."""

    @abstractmethod
    def subscribe(self, event_type: str, handler: Callable):
        pass

    def start_listening(self):
        """Begin delivering events published by other processes. No-op for in-process buses."""
        return None
