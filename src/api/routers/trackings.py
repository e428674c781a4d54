"""Carrier tracking refresh for the back-office."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import Principal, get_tracking_service
from src.api.schemas.tracking import (
    BatchResults,
    TrackingBatchResponse,
    TrackingCheckRequest,
    TrackingCheckResponse,
    TrackingEventSchema,
)
from src.services.tracking import TrackingService

router = APIRouter(prefix="/trackings", tags=["trackings"])

TrackingServiceDep = Annotated[TrackingService, Depends(get_tracking_service)]


@router.post("/check", response_model=TrackingCheckResponse)
async def check_tracking(
    body: TrackingCheckRequest, service: TrackingServiceDep, _principal: Principal
) -> TrackingCheckResponse:
    result = await service.check(body.tracking_code, body.tracking_id)
    return TrackingCheckResponse(
        tracking_code=result.tracking_code,
        status=result.status,
        events=[TrackingEventSchema.model_validate(e) for e in result.events],
        updated_at=result.updated_at,
    )


@router.post("/check-all", response_model=TrackingBatchResponse)
async def check_all_trackings(
    service: TrackingServiceDep, _principal: Principal
) -> TrackingBatchResponse:
    """Refresh every tracking that has not been delivered yet."""
    result = await service.check_all()
    return TrackingBatchResponse(
        message=f"Checked {result.total} trackings, {result.updated} updated",
        results=BatchResults(
            total=result.total,
            updated=result.updated,
            errors=result.errors,
            notifications=result.notifications,
        ),
        checked_at=datetime.now(UTC),
    )
