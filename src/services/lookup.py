"""Public lookups used by the customer area and the tracking page.

Only fields that are safe to show to anyone holding an order number or a
tracking code leave this module: never the client phone, never internal ids
other than the tracking row id.
"""

from dataclasses import dataclass
from typing import Final

from loguru import logger

from src.core.config import TrackingConfig
from src.core.exceptions import NotFoundError, ValidationError
from src.domain.orders import TRACKABLE_STATUSES
from src.infrastructure.database.models import Company, Order, OrderTracking
from src.infrastructure.repositories.orders import (
    CompanyRepository,
    OrderRepository,
    OrderTrackingRepository,
)

MIN_TRACKING_CODE_LENGTH: Final[int] = 5
MAX_TRACKING_CODE_LENGTH: Final[int] = 30


@dataclass(frozen=True, slots=True)
class OrderLookup:
    order: Order
    tracking: OrderTracking | None
    tracking_url: str | None
    company: Company | None


def normalize_tracking_code(code: str | None) -> str:
    """Upper-case and trim a tracking code typed by a customer.

    Raises:
        ValidationError: If the code is missing or not 5 to 30 characters.
    """
    if not code:
        raise ValidationError("Tracking code is required")
    sanitized = code.upper().strip()
    if not MIN_TRACKING_CODE_LENGTH <= len(sanitized) <= MAX_TRACKING_CODE_LENGTH:
        raise ValidationError(
            "Invalid tracking code format", context={"length": len(sanitized)}
        )
    return sanitized


class PublicLookupService:
    def __init__(
        self,
        orders: OrderRepository,
        trackings: OrderTrackingRepository,
        companies: CompanyRepository,
        config: TrackingConfig,
    ) -> None:
        self.orders = orders
        self.trackings = trackings
        self.companies = companies
        self.config = config

    async def find_tracking(self, code: str | None) -> OrderTracking:
        """Return the newest tracking registered under a code.

        Raises:
            ValidationError: If the code is missing or malformed.
            NotFoundError: If no tracking uses the code.
        """
        sanitized = normalize_tracking_code(code)
        logger.info("Looking up tracking code {}", sanitized)
        tracking = await self.trackings.latest_by_code(sanitized)
        if tracking is None:
            raise NotFoundError("Tracking not found")
        return tracking

    async def find_order(self, order_number: str | None) -> OrderLookup:
        """Return an order with its parcel tracking and the company profile.

        Tracking is only included once the order has shipped.

        Raises:
            ValidationError: If no order number was given.
            NotFoundError: If the order does not exist.
        """
        number = (order_number or "").strip()
        if not number:
            raise ValidationError("Order number is required")

        order = await self.orders.get_by_number(number)
        if order is None:
            raise NotFoundError("Order not found")

        tracking = None
        tracking_url = None
        if order.status in TRACKABLE_STATUSES:
            tracking = await self.trackings.latest_for_order(order.id)
            if tracking is not None:
                base_url = self.config.public_tracking_url
                tracking_url = f"{base_url}{tracking.tracking_code}"

        return OrderLookup(
            order=order,
            tracking=tracking,
            tracking_url=tracking_url,
            company=await self.companies.get_profile(),
        )
