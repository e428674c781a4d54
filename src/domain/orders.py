"""Order lifecycle states."""

from enum import StrEnum
from typing import Final


class OrderStatus(StrEnum):
    """Production pipeline of an order, in order."""

    AWAITING_PAYMENT = "awaiting_payment"
    CREATING_ART = "creating_art"
    PRODUCTION = "production"
    SHIPPING = "shipping"
    DELIVERED = "delivered"


# Statuses for which a parcel exists and tracking is shown to the client
TRACKABLE_STATUSES: Final[frozenset[OrderStatus]] = frozenset(
    {OrderStatus.SHIPPING, OrderStatus.DELIVERED}
)
