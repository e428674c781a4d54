"""Bodies of the video testimonial endpoints."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class VideoType(StrEnum):
    UPLOAD = "upload"
    INSTAGRAM = "instagram"


class VideoTestimonialCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    video_url: str = Field(..., min_length=1)
    video_type: VideoType = VideoType.UPLOAD
    display_order: int = 0
    is_active: bool = True


class VideoTestimonialUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    video_url: str | None = Field(default=None, min_length=1)
    video_type: VideoType | None = None
    display_order: int | None = None
    is_active: bool | None = None


class VideoTestimonialResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    video_url: str
    video_type: str
    display_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
