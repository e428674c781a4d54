"""Bodies of the tracking and public lookup endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class TrackingEventSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str = Field(..., examples=["02/03/2026"])
    time: str = Field(..., examples=["14:35"])
    location: str
    status: str
    description: str


class TrackingCheckRequest(BaseModel):
    tracking_code: str | None = Field(default=None, examples=["AA123456789BR"])
    tracking_id: int | None = None


class TrackingCheckResponse(BaseModel):
    success: bool = True
    tracking_code: str
    status: str
    events: list[TrackingEventSchema]
    updated_at: datetime


class BatchResults(BaseModel):
    total: int
    updated: int
    errors: int
    notifications: list[str]


class TrackingBatchResponse(BaseModel):
    success: bool = True
    message: str
    results: BatchResults
    checked_at: datetime


class PublicTrackingResponse(BaseModel):
    """Tracking fields safe to show to anyone holding the code."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str | None
    client_name: str | None
    tracking_code: str
    carrier: str
    status: str
    events: list[TrackingEventSchema]
    last_update: datetime | None


class PublicOrder(BaseModel):
    number: str
    status: str
    created_at: datetime
    client_name: str


class PublicOrderTracking(BaseModel):
    tracking_code: str
    status: str
    estimated_delivery: date | None
    tracking_url: str


class PublicCompany(BaseModel):
    name: str
    logo_url: str | None


class PublicOrderResponse(BaseModel):
    order: PublicOrder
    tracking: PublicOrderTracking | None
    company: PublicCompany | None
