"""Request-scoped context stored in contextvars.

Values set here survive ``await`` boundaries, so services and repositories
can read the correlation ID and the acting user without receiving them as
arguments.
"""

import uuid
from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_actor_var: ContextVar[str | None] = ContextVar("actor", default=None)


class RequestContext:
    """Async-safe accessors for request-scoped values."""

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        return _correlation_id_var.get()

    @staticmethod
    def set_actor(actor: str) -> None:
        """Record who is performing the current request.

        Args:
            actor: Token kind and subject, such as ``admin:gerente`` or ``user:7``.
        """
        _actor_var.set(actor)

    @staticmethod
    def get_actor() -> str | None:
        return _actor_var.get()

    @staticmethod
    def clear() -> None:
        """Reset every request-scoped value."""
        _correlation_id_var.set(None)
        _actor_var.set(None)


def generate_correlation_id() -> str:
    """Generate a UUID4 correlation ID for request tracking.

    Returns:
        str: A string representation of a UUID4.
    """
    return str(uuid.uuid4())
