"""Creation and reset of back-office users.

Two ways to be allowed to create a user exist: presenting the configured
setup key (used to bootstrap the first admin) or a bearer token of a
back-office user whose current role is ``admin``. Resetting a user always
requires the setup key.
"""

import secrets

from loguru import logger

from src.core.config import AuthConfig
from src.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from src.core.security import TokenKind, decode_access_token, hash_password
from src.domain.roles import AppRole, resolve_role
from src.infrastructure.database.models import User
from src.infrastructure.repositories.accounts import UserRepository


class UserProvisioningService:
    """Creates back-office users and resets their passwords."""

    def __init__(self, users: UserRepository, config: AuthConfig) -> None:
        self.users = users
        self.config = config

    def _setup_key_matches(self, setup_key: str | None) -> bool:
        expected = self.config.setup_key
        if expected is None or not setup_key:
            return False
        return secrets.compare_digest(
            setup_key.encode(), expected.get_secret_value().encode()
        )

    async def _require_admin(self, token: str | None) -> None:
        """Check that the token belongs to a back-office admin.

        Raises:
            UnauthorizedError: No token, an invalid one, or an unknown user.
            ForbiddenError: The caller is not a back-office admin.
        """
        if not token:
            raise UnauthorizedError("Authentication required")

        claims = decode_access_token(token, self.config)
        if claims.kind is not TokenKind.USER or not claims.sub.isdigit():
            raise ForbiddenError("Only administrators can create users")

        caller = await self.users.get_by_id(int(claims.sub))
        if caller is None:
            raise UnauthorizedError("Authentication required")
        if await self.users.get_role(caller.id) != AppRole.ADMIN:
            logger.warning("Non-admin user {} tried to create a user", caller.id)
            raise ForbiddenError("Only administrators can create users")

    async def create_user(
        self,
        email: str | None,
        password: str | None,
        role: str | None = None,
        setup_key: str | None = None,
        token: str | None = None,
    ) -> User:
        """Create a back-office user with a role.

        Args:
            email: New user's email.
            password: New user's password.
            role: Requested role; anything not assignable becomes ``vendedor``.
            setup_key: Bootstrap key, checked before the token.
            token: Bearer token of the caller.

        Returns:
            User: The created user.

        Raises:
            UnauthorizedError: Neither a valid setup key nor a valid token.
            ForbiddenError: The caller is not an admin.
            ValidationError: Email or password missing.
            ConflictError: The email is already registered.
        """
        if self._setup_key_matches(setup_key):
            logger.info("Creating user with the setup key")
        else:
            await self._require_admin(token)

        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required")

        normalized_email = email.strip().lower()
        if await self.users.get_by_email(normalized_email) is not None:
            raise ConflictError(
                "A user with this email already exists",
                context={"email": normalized_email},
            )

        user = await self.users.create(
            User(email=normalized_email, password_hash=hash_password(password))
        )
        granted = resolve_role(role, AppRole.VENDEDOR)
        await self.users.add_role(user, granted)

        logger.info("User {} created with role {}", user.id, granted.value)
        return user

    async def reset_user(
        self,
        email: str | None,
        password: str | None,
        role: str | None = None,
        setup_key: str | None = None,
    ) -> User:
        """Replace a user's password, granting a role if they have none.

        Args:
            email: Email of the user to reset.
            password: New password.
            role: Role granted when the user has none; defaults to ``admin``.
            setup_key: Bootstrap key, mandatory.

        Returns:
            User: The updated user.

        Raises:
            ForbiddenError: The setup key is missing or wrong.
            ValidationError: Email or password missing.
            NotFoundError: No user has this email.
        """
        if not self._setup_key_matches(setup_key):
            raise ForbiddenError("Invalid setup key")

        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.users.get_by_email(email.strip())
        if user is None:
            raise NotFoundError("User not found")

        updated = await self.users.update(
            user.id, {"password_hash": hash_password(password)}
        )
        user = updated or user

        existing_role = await self.users.get_role(user.id)
        if existing_role is None:
            granted = resolve_role(role, AppRole.ADMIN)
            await self.users.add_role(user, granted)
            logger.info("Added role {} for user {}", granted.value, user.id)
        else:
            logger.info("User {} already has role {}", user.id, existing_role.value)

        return user
