"""
Order state machine.

    pending ──seller──▶ confirmed
       │                   │
       └──buyer/seller──▶ cancelled ◀──buyer──┘

Cancelled is terminal. The table is keyed by the caller's role so the same
status pair can be legal for one party and illegal for the other.
"""

from typing import Dict, List

from marketplace.domain.policy import Role

PENDING = "pending"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"

STATUSES = (PENDING, CONFIRMED, CANCELLED)
ACTIVE_STATUSES = (PENDING, CONFIRMED)
INITIAL_STATUS = PENDING

TRANSITIONS: Dict[Role, Dict[str, List[str]]] = {
    Role.BUYER: {
        PENDING: [CANCELLED],
        CONFIRMED: [CANCELLED],
        CANCELLED: [],
    },
    Role.SELLER: {
        PENDING: [CONFIRMED, CANCELLED],
        CONFIRMED: [],
        CANCELLED: [],
    },
}


def is_valid_status(status) -> bool:
    return status in STATUSES


def is_active(status: str) -> bool:
    return status in ACTIVE_STATUSES


def allowed_transitions(role, status: str) -> List[str]:
    """Statuses reachable from `status` for `role`; empty for unknown roles or states."""
    try:
        role = Role(role)
    except ValueError:
        return []
    return list(TRANSITIONS.get(role, {}).get(status, []))


def can_transition(role, current: str, target: str) -> bool:
    return target in allowed_transitions(role, current)
