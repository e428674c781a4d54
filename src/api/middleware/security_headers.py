"""Security headers added to every response."""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.core.constants import DEFAULT_HSTS_MAX_AGE


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds ``nosniff``, frame denial, referrer policy and optionally HSTS.

    Stored files under ``/files`` are embedded by the public site, so they
    are the only responses allowed inside frames of the same origin.

    Args:
        app: The ASGI application to wrap.
        hsts_enabled: Whether to send Strict-Transport-Security.
        hsts_max_age: HSTS max age in seconds.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        hsts_enabled: bool = True,
        hsts_max_age: int = DEFAULT_HSTS_MAX_AGE,
    ) -> None:
        super().__init__(app)
        self.hsts_header = (
            f"max-age={hsts_max_age}; includeSubDomains" if hsts_enabled else None
        )

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = (
            "SAMEORIGIN" if request.url.path.startswith("/files/") else "DENY"
        )
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if self.hsts_header:
            response.headers["Strict-Transport-Security"] = self.hsts_header

        return response
