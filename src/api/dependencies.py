"""FastAPI dependencies: authentication, repositories and services.

Endpoints receive fully built services; tests replace these providers with
``app.dependency_overrides``.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

import httpx
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from src.core.config import Settings, get_settings
from src.core.context import RequestContext
from src.core.exceptions import ForbiddenError, UnauthorizedError
from src.core.security import TokenClaims, TokenKind, decode_access_token
from src.domain.roles import AppRole
from src.infrastructure.carriers import CarrierClient
from src.infrastructure.constants import CARRIER_USER_AGENT
from src.infrastructure.database.dependencies import DatabaseSession
from src.infrastructure.repositories import (
    AdminUserRepository,
    CompanyRepository,
    LoginAttemptRepository,
    OrderRepository,
    OrderTrackingRepository,
    UserRepository,
    VideoTestimonialRepository,
)
from src.infrastructure.storage import BlobStorage, get_blob_storage
from src.services.auth import AuthService
from src.services.lookup import PublicLookupService
from src.services.media import MediaService
from src.services.testimonials import VideoTestimonialService
from src.services.tracking import TrackingService
from src.services.users import UserProvisioningService

AppSettings = Annotated[Settings, Depends(get_settings)]

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> str | None:
    return credentials.credentials if credentials else None


BearerToken = Annotated[str | None, Depends(get_bearer_token)]


def get_client_ip(request: Request) -> str | None:
    """Client address resolved by the request logging middleware."""
    client_ip = getattr(request.state, "client_ip", None)
    if client_ip is None and request.client:
        return request.client.host
    return client_ip


ClientIp = Annotated[str | None, Depends(get_client_ip)]


async def get_principal(token: BearerToken, settings: AppSettings) -> TokenClaims:
    """Decode the bearer token of the caller.

    Raises:
        UnauthorizedError: If no token was sent or it is invalid.
    """
    if not token:
        raise UnauthorizedError("Authentication required")
    claims = decode_access_token(token, settings.auth_config)
    RequestContext.set_actor(f"{claims.kind}:{claims.sub}")
    logger.debug("Authenticated {} {}", claims.kind, claims.sub)
    return claims


Principal = Annotated[TokenClaims, Depends(get_principal)]


# Repositories


def get_admin_user_repository(db: DatabaseSession) -> AdminUserRepository:
    return AdminUserRepository(db)


def get_user_repository(db: DatabaseSession) -> UserRepository:
    return UserRepository(db)


def get_login_attempt_repository(db: DatabaseSession) -> LoginAttemptRepository:
    return LoginAttemptRepository(db)


def get_testimonial_repository(db: DatabaseSession) -> VideoTestimonialRepository:
    return VideoTestimonialRepository(db)


def get_order_repository(db: DatabaseSession) -> OrderRepository:
    return OrderRepository(db)


def get_tracking_repository(db: DatabaseSession) -> OrderTrackingRepository:
    return OrderTrackingRepository(db)


def get_company_repository(db: DatabaseSession) -> CompanyRepository:
    return CompanyRepository(db)


async def require_admin(
    principal: Principal,
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> TokenClaims:
    """Allow admin panel accounts and back-office users with the admin role.

    The role of a back-office user is read from the database, so a revoked
    role takes effect before the token expires.

    Raises:
        ForbiddenError: If the caller is not an administrator.
    """
    if principal.kind is TokenKind.ADMIN:
        return principal
    if principal.sub.isdigit():
        role = await users.get_role(int(principal.sub))
        if role == AppRole.ADMIN:
            return principal
    raise ForbiddenError("Administrator access required")


AdminPrincipal = Annotated[TokenClaims, Depends(require_admin)]


async def get_carrier_client(
    settings: AppSettings,
) -> AsyncGenerator[CarrierClient]:
    """Carrier client with an HTTP connection pool scoped to the request."""
    config = settings.tracking_config
    async with httpx.AsyncClient(
        timeout=config.request_timeout_seconds,
        headers={"User-Agent": CARRIER_USER_AGENT},
        follow_redirects=True,
    ) as http:
        yield CarrierClient(http, config)


# Services


def get_auth_service(
    admins: Annotated[AdminUserRepository, Depends(get_admin_user_repository)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
    attempts: Annotated[LoginAttemptRepository, Depends(get_login_attempt_repository)],
    settings: AppSettings,
) -> AuthService:
    return AuthService(admins, users, attempts, settings.auth_config)


def get_user_provisioning_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    settings: AppSettings,
) -> UserProvisioningService:
    return UserProvisioningService(users, settings.auth_config)


def get_testimonial_service(
    testimonials: Annotated[
        VideoTestimonialRepository, Depends(get_testimonial_repository)
    ],
) -> VideoTestimonialService:
    return VideoTestimonialService(testimonials)


def get_media_service(
    storage: Annotated[BlobStorage, Depends(get_blob_storage)],
    settings: AppSettings,
) -> MediaService:
    return MediaService(storage, settings.storage_config, settings.business_config)


def get_tracking_service(
    trackings: Annotated[OrderTrackingRepository, Depends(get_tracking_repository)],
    carrier: Annotated[CarrierClient, Depends(get_carrier_client)],
) -> TrackingService:
    return TrackingService(trackings, carrier)


def get_lookup_service(
    orders: Annotated[OrderRepository, Depends(get_order_repository)],
    trackings: Annotated[OrderTrackingRepository, Depends(get_tracking_repository)],
    companies: Annotated[CompanyRepository, Depends(get_company_repository)],
    settings: AppSettings,
) -> PublicLookupService:
    return PublicLookupService(orders, trackings, companies, settings.tracking_config)
