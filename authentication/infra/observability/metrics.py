"""
Prometheus Metrics

Defines the Prometheus metrics for account monitoring. They share the default
registry, so they are exposed at /api/marketplace/metrics/ with the rest.
"""

from prometheus_client import Counter

# ===== Signup Metrics =====

signup_total = Counter("auth_signup_total", "Total signup attempts", ["status"])
"""
Signup attempts counter.
Labels: status (success, email_taken, username_taken, conflict, error)

Example:
    signup_total.labels(status='success').inc()
"""

# ===== Login Metrics =====

login_total = Counter("auth_login_total", "Total login attempts", ["status"])
"""
Login attempts counter (JWT pair issuance).
Labels: status (success/failed)
"""

# ===== Profile Metrics =====

profile_updates_total = Counter("auth_profile_updates_total", "Profile updates", ["status"])
"""
Profile update counter.
Labels: status (success or the failing error code)
"""
