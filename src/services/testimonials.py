"""Management of the video testimonials shown on the public site."""

from collections.abc import Mapping

from loguru import logger

from src.core.exceptions import NotFoundError
from src.infrastructure.database.models import VideoTestimonial
from src.infrastructure.repositories.testimonials import VideoTestimonialRepository


class VideoTestimonialService:
    def __init__(self, testimonials: VideoTestimonialRepository) -> None:
        self.testimonials = testimonials

    async def list(self, *, active_only: bool = False) -> list[VideoTestimonial]:
        return await self.testimonials.list_ordered(active_only=active_only)

    async def create(self, fields: Mapping[str, object]) -> VideoTestimonial:
        testimonial = await self.testimonials.create(VideoTestimonial(**fields))
        logger.info("Video testimonial {} created", testimonial.id)
        return testimonial

    async def update(
        self, testimonial_id: int, fields: Mapping[str, object]
    ) -> VideoTestimonial:
        """Apply a partial update.

        Raises:
            NotFoundError: If no testimonial has this id.
        """
        testimonial = await self.testimonials.update(testimonial_id, fields)
        if testimonial is None:
            raise NotFoundError(
                "Video testimonial not found",
                context={"testimonial_id": testimonial_id},
            )
        return testimonial

    async def delete(self, testimonial_id: int) -> None:
        """Delete a testimonial.

        Raises:
            NotFoundError: If no testimonial has this id.
        """
        if not await self.testimonials.delete(testimonial_id):
            raise NotFoundError(
                "Video testimonial not found",
                context={"testimonial_id": testimonial_id},
            )
