"""Repositories for orders, parcel trackings and the company profile."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.tracking import TrackingStatus
from src.infrastructure.database.models import Company, Order, OrderTracking
from src.infrastructure.database.repository import BaseRepository


class OrderRepository(BaseRepository[Order]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Order)

    async def get_by_number(self, number: str) -> Order | None:
        return await self.find_one_by(number=number)


class OrderTrackingRepository(BaseRepository[OrderTracking]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, OrderTracking)

    async def latest_by_code(self, tracking_code: str) -> OrderTracking | None:
        """Newest tracking row for a code; codes may have been registered twice."""
        stmt = (
            select(OrderTracking)
            .where(OrderTracking.tracking_code == tracking_code)
            .order_by(OrderTracking.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def latest_for_order(self, order_id: int) -> OrderTracking | None:
        stmt = (
            select(OrderTracking)
            .where(OrderTracking.order_id == order_id)
            .order_by(OrderTracking.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_undelivered(self) -> list[OrderTracking]:
        """Trackings still in progress, newest first."""
        stmt = (
            select(OrderTracking)
            .where(OrderTracking.status != TrackingStatus.DELIVERED.value)
            .order_by(OrderTracking.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class CompanyRepository(BaseRepository[Company]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Company)

    async def get_profile(self) -> Company | None:
        return await self.find_one_by()
