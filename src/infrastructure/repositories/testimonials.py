"""Repository for video testimonials."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import VideoTestimonial
from src.infrastructure.database.repository import BaseRepository


class VideoTestimonialRepository(BaseRepository[VideoTestimonial]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, VideoTestimonial)

    async def list_ordered(
        self, *, active_only: bool = False
    ) -> list[VideoTestimonial]:
        """All testimonials by ``display_order``, optionally only active ones."""
        stmt = select(VideoTestimonial).order_by(
            VideoTestimonial.display_order, VideoTestimonial.id
        )
        if active_only:
            stmt = stmt.where(VideoTestimonial.is_active.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
