"""Video testimonials: public listing, admin management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import AdminPrincipal, get_testimonial_service
from src.api.schemas.testimonials import (
    VideoTestimonialCreate,
    VideoTestimonialResponse,
    VideoTestimonialUpdate,
)
from src.services.testimonials import VideoTestimonialService

router = APIRouter(prefix="/video-testimonials", tags=["video-testimonials"])

TestimonialServiceDep = Annotated[
    VideoTestimonialService, Depends(get_testimonial_service)
]


@router.get("", response_model=list[VideoTestimonialResponse])
async def list_testimonials(
    service: TestimonialServiceDep,
    active_only: Annotated[bool, Query()] = False,
) -> list[VideoTestimonialResponse]:
    testimonials = await service.list(active_only=active_only)
    return [VideoTestimonialResponse.model_validate(t) for t in testimonials]


@router.post(
    "",
    response_model=VideoTestimonialResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_testimonial(
    body: VideoTestimonialCreate,
    service: TestimonialServiceDep,
    _admin: AdminPrincipal,
) -> VideoTestimonialResponse:
    testimonial = await service.create(body.model_dump(mode="json"))
    return VideoTestimonialResponse.model_validate(testimonial)


@router.put("/{testimonial_id}", response_model=VideoTestimonialResponse)
async def update_testimonial(
    testimonial_id: int,
    body: VideoTestimonialUpdate,
    service: TestimonialServiceDep,
    _admin: AdminPrincipal,
) -> VideoTestimonialResponse:
    testimonial = await service.update(
        testimonial_id, body.model_dump(mode="json", exclude_unset=True)
    )
    return VideoTestimonialResponse.model_validate(testimonial)


@router.delete("/{testimonial_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_testimonial(
    testimonial_id: int,
    service: TestimonialServiceDep,
    _admin: AdminPrincipal,
) -> None:
    await service.delete(testimonial_id)
