"""Unauthenticated lookups used by customers."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_lookup_service
from src.api.schemas.tracking import (
    PublicCompany,
    PublicOrder,
    PublicOrderResponse,
    PublicOrderTracking,
    PublicTrackingResponse,
)
from src.services.lookup import PublicLookupService

router = APIRouter(prefix="/public", tags=["public"])

LookupServiceDep = Annotated[PublicLookupService, Depends(get_lookup_service)]


@router.get("/trackings", response_model=PublicTrackingResponse)
async def lookup_tracking(
    service: LookupServiceDep,
    code: Annotated[str | None, Query()] = None,
) -> PublicTrackingResponse:
    tracking = await service.find_tracking(code)
    return PublicTrackingResponse.model_validate(tracking)


@router.get("/orders", response_model=PublicOrderResponse)
async def lookup_order(
    service: LookupServiceDep,
    order_number: Annotated[str | None, Query(alias="orderNumber")] = None,
) -> PublicOrderResponse:
    result = await service.find_order(order_number)
    order = result.order

    tracking = None
    if result.tracking is not None and result.tracking_url is not None:
        tracking = PublicOrderTracking(
            tracking_code=result.tracking.tracking_code,
            status=result.tracking.status,
            estimated_delivery=result.tracking.estimated_delivery,
            tracking_url=result.tracking_url,
        )
    company = None
    if result.company is not None:
        company = PublicCompany(
            name=result.company.name, logo_url=result.company.logo_url
        )

    return PublicOrderResponse(
        order=PublicOrder(
            number=order.number,
            status=order.status,
            created_at=order.created_at,
            client_name=order.client_name,
        ),
        tracking=tracking,
        company=company,
    )
