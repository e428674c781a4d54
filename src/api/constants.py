"""Constants of the HTTP layer."""

from typing import Final

CORRELATION_ID_HEADER: Final[str] = "X-Correlation-ID"
REQUEST_ID_HEADER: Final[str] = "X-Request-ID"

MAX_USER_AGENT_LENGTH: Final[int] = 200
