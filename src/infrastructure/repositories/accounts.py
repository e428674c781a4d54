"""Repositories for admin accounts, back-office users and login attempts."""

from datetime import datetime

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.roles import AppRole
from src.infrastructure.database.models import AdminUser, LoginAttempt, User, UserRole
from src.infrastructure.database.repository import BaseRepository


class AdminUserRepository(BaseRepository[AdminUser]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AdminUser)

    async def get_by_username(self, username: str) -> AdminUser | None:
        return await self.find_one_by(username=username)


class UserRepository(BaseRepository[User]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Look a user up by email, ignoring case."""
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_role(self, user_id: int) -> AppRole | None:
        """Return the most recently granted role of a user, if any."""
        stmt = (
            select(UserRole.role)
            .where(UserRole.user_id == user_id)
            .order_by(UserRole.created_at.desc(), UserRole.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_role(self, user: User, role: AppRole) -> UserRole:
        """Grant a role, storing the user's email alongside it."""
        user_role = UserRole(user_id=user.id, role=role, email=user.email)
        self.session.add(user_role)
        await self.session.flush()
        logger.info("Granted role {} to user ID: {}", role.value, user.id)
        return user_role


class LoginAttemptRepository(BaseRepository[LoginAttempt]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, LoginAttempt)

    async def record(
        self,
        identifier: str,
        *,
        success: bool,
        ip_address: str | None,
        commit: bool = False,
    ) -> LoginAttempt:
        """Store an attempt.

        Args:
            identifier: Username or email the attempt was made for.
            success: Whether the credentials were accepted.
            ip_address: Client address.
            commit: Commit immediately so the row outlives a rollback of the
                surrounding request.

        Returns:
            LoginAttempt: The stored attempt.
        """
        attempt = LoginAttempt(
            identifier=identifier, success=success, ip_address=ip_address
        )
        self.session.add(attempt)
        if commit:
            await self.session.commit()
        else:
            await self.session.flush()
        return attempt

    async def recent_failures(self, identifier: str, since: datetime) -> list[datetime]:
        """Times of failed attempts after ``since`` and after the last success.

        Args:
            identifier: Username or email the attempts were made for.
            since: Start of the lockout window.

        Returns:
            list[datetime]: Failure times, newest first.
        """
        last_success = await self.session.execute(
            select(func.max(LoginAttempt.attempted_at)).where(
                LoginAttempt.identifier == identifier,
                LoginAttempt.success.is_(True),
            )
        )
        last_success_at = last_success.scalar()
        window_start = max(since, last_success_at) if last_success_at else since

        stmt = (
            select(LoginAttempt.attempted_at)
            .where(
                LoginAttempt.identifier == identifier,
                LoginAttempt.success.is_(False),
                LoginAttempt.attempted_at > window_start,
            )
            .order_by(LoginAttempt.attempted_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
