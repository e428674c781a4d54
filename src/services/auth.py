"""Login for admin panel accounts and back-office users, with lockout.

Every attempt is stored in ``login_attempts`` keyed by the username or
email. Once ``max_login_attempts`` failures happened inside the last
``login_block_minutes`` (and after the last success), further attempts are
refused until enough of those failures leave the window that fewer than
``max_login_attempts`` remain.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from loguru import logger

from src.core.config import AuthConfig
from src.core.exceptions import TooManyAttemptsError, UnauthorizedError
from src.core.security import TokenKind, create_access_token, verify_password
from src.domain.roles import AppRole
from src.infrastructure.repositories.accounts import (
    AdminUserRepository,
    LoginAttemptRepository,
    UserRepository,
)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True, slots=True)
class AdminSession:
    token: str
    username: str


@dataclass(frozen=True, slots=True)
class UserSession:
    token: str
    user_id: int
    email: str
    role: AppRole | None


class AuthService:
    """Authenticates admins and back-office users and issues access tokens."""

    def __init__(
        self,
        admins: AdminUserRepository,
        users: UserRepository,
        attempts: LoginAttemptRepository,
        config: AuthConfig,
    ) -> None:
        self.admins = admins
        self.users = users
        self.attempts = attempts
        self.config = config

    async def _recent_failures(self, identifier: str, now: datetime) -> list[datetime]:
        since = now - timedelta(minutes=self.config.login_block_minutes)
        return await self.attempts.recent_failures(identifier, since)

    def _ensure_not_blocked(
        self, identifier: str, failures: list[datetime], now: datetime
    ) -> None:
        """Refuse the attempt while the identifier is locked out.

        Raises:
            TooManyAttemptsError: With the minutes left until the block ends.
        """
        if len(failures) < self.config.max_login_attempts:
            return

        # Newest first; the block lifts when the oldest counted failure expires
        oldest_counted = failures[self.config.max_login_attempts - 1]
        unblock_at = oldest_counted + timedelta(
            minutes=self.config.login_block_minutes
        )
        remaining_minutes = max(1, math.ceil((unblock_at - now).total_seconds() / 60))
        logger.warning(
            "Login blocked for {}",
            identifier,
            remaining_minutes=remaining_minutes,
        )
        raise TooManyAttemptsError(
            f"Too many failed attempts. Try again in {remaining_minutes} minutes",
            context={"remaining_minutes": remaining_minutes},
        )

    async def _reject(
        self, identifier: str, ip_address: str | None, previous_failures: int
    ) -> UnauthorizedError:
        # The raised error rolls the request session back
        await self.attempts.record(
            identifier, success=False, ip_address=ip_address, commit=True
        )
        remaining = max(0, self.config.max_login_attempts - previous_failures - 1)
        logger.info("Failed login for {}", identifier, remaining_attempts=remaining)
        return UnauthorizedError(
            INVALID_CREDENTIALS, context={"remaining_attempts": remaining}
        )

    async def admin_login(
        self, username: str, password: str, ip_address: str | None = None
    ) -> AdminSession:
        """Authenticate an admin panel account.

        Args:
            username: Admin username.
            password: Plain password.
            ip_address: Client address, stored with the attempt.

        Returns:
            AdminSession: Token and username.

        Raises:
            UnauthorizedError: Unknown username or wrong password.
            TooManyAttemptsError: The username is locked out.
        """
        now = datetime.now(UTC)
        failures = await self._recent_failures(username, now)
        self._ensure_not_blocked(username, failures, now)

        admin = await self.admins.get_by_username(username)
        if admin is None or not verify_password(password, admin.password_hash):
            raise await self._reject(username, ip_address, len(failures))

        await self.attempts.record(username, success=True, ip_address=ip_address)
        token = create_access_token(admin.username, TokenKind.ADMIN, self.config)
        logger.info("Admin {} logged in", admin.username)
        return AdminSession(token=token, username=admin.username)

    async def user_login(
        self, email: str, password: str, ip_address: str | None = None
    ) -> UserSession:
        """Authenticate a back-office user.

        Args:
            email: User email, case-insensitive.
            password: Plain password.
            ip_address: Client address, stored with the attempt.

        Returns:
            UserSession: Token, user id, email and current role.

        Raises:
            UnauthorizedError: Unknown email or wrong password.
            TooManyAttemptsError: The email is locked out.
        """
        identifier = email.strip().lower()
        now = datetime.now(UTC)
        failures = await self._recent_failures(identifier, now)
        self._ensure_not_blocked(identifier, failures, now)

        user = await self.users.get_by_email(identifier)
        if user is None or not verify_password(password, user.password_hash):
            raise await self._reject(identifier, ip_address, len(failures))

        await self.attempts.record(identifier, success=True, ip_address=ip_address)
        role = await self.users.get_role(user.id)
        token = create_access_token(
            str(user.id),
            TokenKind.USER,
            self.config,
            role=role.value if role else None,
        )
        logger.info("User {} logged in", user.id, role=role)
        return UserSession(token=token, user_id=user.id, email=user.email, role=role)
