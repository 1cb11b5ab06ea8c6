"""
Observability Infrastructure

Prometheus metrics for the authentication context.
"""

from .metrics import login_total, profile_updates_total, signup_total

__all__ = [
    "login_total",
    "profile_updates_total",
    "signup_total",
]
