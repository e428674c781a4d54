"""Access logging with timing.

Each request produces a "Request started" and a "Request completed" (or
"Request failed") record carrying the request ID, method, path, client
address and duration. Requests slower than ``slow_request_threshold_ms`` get
an extra warning. Paths listed in ``excluded_paths`` are not logged.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.api.constants import MAX_USER_AGENT_LENGTH, REQUEST_ID_HEADER
from src.core.config import LogConfig, get_settings
from src.core.error_context import sanitize_dict, sanitize_headers


def get_client_ip(request: Request, *, trust_proxy: bool) -> str | None:
    """Return the caller address, honouring proxy headers when trusted.

    Args:
        request: The incoming request.
        trust_proxy: Whether ``X-Forwarded-For``/``X-Real-IP`` may be used.

    Returns:
        str | None: The client address, None when unknown.
    """
    if trust_proxy:
        if forwarded_for := request.headers.get("x-forwarded-for"):
            return forwarded_for.split(",")[0].strip()
        if real_ip := request.headers.get("x-real-ip"):
            return real_ip.strip()
    return request.client.host if request.client else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request with its outcome and duration.

    Args:
        app: The ASGI application.
        log_config: Logging configuration.
    """

    def __init__(self, app: ASGIApp, *, log_config: LogConfig) -> None:
        super().__init__(app)
        self.log_config = log_config
        self.excluded_paths = set(log_config.excluded_paths)
        self.trust_proxy = get_settings().environment == "production"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        client_ip = get_client_ip(request, trust_proxy=self.trust_proxy)
        request.state.client_ip = client_ip

        with logger.contextualize(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=client_ip or "unknown",
            user_agent=request.headers.get("user-agent", "unknown")[
                :MAX_USER_AGENT_LENGTH
            ],
        ):
            logger.info(
                "Request started",
                query_params=sanitize_dict(dict(request.query_params)) or None,
            )
            logger.debug(
                "Request headers", headers=sanitize_headers(dict(request.headers))
            )
            start_time = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    "Request failed",
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                    error_type=type(exc).__name__,
                )
                raise

            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
                response_size=int(response.headers.get("content-length", 0)),
            )
            if duration_ms > self.log_config.slow_request_threshold_ms:
                logger.warning(
                    "Slow request detected",
                    duration_ms=duration_ms,
                    threshold_ms=self.log_config.slow_request_threshold_ms,
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
