"""
Authentication domain events.
"""

from dataclasses import dataclass

from marketplace.domain.events.base import DomainEvent


@dataclass
class UserRegisteredEvent(DomainEvent):
    """Event: Account created through signup."""

    def __init__(self, user_id: str, username: str, email: str):
        super().__init__(
            event_type="user.registered",
            payload={"user_id": user_id, "username": username, "email": email},
        )
