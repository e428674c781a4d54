"""Back-office roles."""

from enum import StrEnum
from typing import Final


class AppRole(StrEnum):
    """Roles stored in ``user_roles``."""

    ADMIN = "admin"
    USER = "user"
    VENDEDOR = "vendedor"
    FINANCEIRO = "financeiro"


ASSIGNABLE_ROLES: Final[frozenset[AppRole]] = frozenset(
    {AppRole.ADMIN, AppRole.VENDEDOR, AppRole.FINANCEIRO}
)


def resolve_role(requested: str | None, default: AppRole) -> AppRole:
    """Map a requested role to an assignable one.

    Args:
        requested: Role name sent by the client, possibly missing or unknown.
        default: Role used when ``requested`` is not assignable.

    Returns:
        AppRole: ``requested`` when it names an assignable role, else ``default``.
    """
    if requested in ASSIGNABLE_ROLES:
        return AppRole(requested)
    return default
