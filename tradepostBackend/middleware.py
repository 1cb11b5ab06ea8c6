"""Custom middleware helpers for the Tradepost backend."""

from __future__ import annotations

from typing import Callable


class JWTCSRFBypassMiddleware:
    """Skip CSRF enforcement for requests carrying a JWT bearer token.

    The API authenticates through the Authorization header only, so a request
    that presents a bearer token cannot be forged by a third-party page. The
    admin site still relies on session cookies and keeps its CSRF protection.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request):
        authorization = request.META.get("HTTP_AUTHORIZATION", "")
        if authorization.lower().startswith("bearer "):
            request._dont_enforce_csrf_checks = True  # type: ignore[attr-defined]
            request.META.setdefault("CSRF_SKIP_REASON", "jwt-bearer")
        return self.get_response(request)
