"""Repositories for the service's aggregates."""

from src.infrastructure.repositories.accounts import (
    AdminUserRepository,
    LoginAttemptRepository,
    UserRepository,
)
from src.infrastructure.repositories.orders import (
    CompanyRepository,
    OrderRepository,
    OrderTrackingRepository,
)
from src.infrastructure.repositories.testimonials import VideoTestimonialRepository

__all__ = [
    "AdminUserRepository",
    "CompanyRepository",
    "LoginAttemptRepository",
    "OrderRepository",
    "OrderTrackingRepository",
    "UserRepository",
    "VideoTestimonialRepository",
]
