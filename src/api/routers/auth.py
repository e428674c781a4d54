"""Login and back-office user provisioning."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    BearerToken,
    ClientIp,
    get_auth_service,
    get_user_provisioning_service,
)
from src.api.schemas.auth import (
    AdminLoginRequest,
    AdminLoginResponse,
    CreateUserRequest,
    ResetUserRequest,
    UserLoginRequest,
    UserLoginResponse,
    UserProvisionedResponse,
)
from src.services.auth import AuthService
from src.services.users import UserProvisioningService

router = APIRouter(prefix="/auth", tags=["auth"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProvisioningDep = Annotated[
    UserProvisioningService, Depends(get_user_provisioning_service)
]


@router.post("/admin/login", response_model=AdminLoginResponse)
async def admin_login(
    body: AdminLoginRequest, service: AuthServiceDep, client_ip: ClientIp
) -> AdminLoginResponse:
    session = await service.admin_login(body.username, body.password, client_ip)
    return AdminLoginResponse(token=session.token, username=session.username)


@router.post("/login", response_model=UserLoginResponse)
async def user_login(
    body: UserLoginRequest, service: AuthServiceDep, client_ip: ClientIp
) -> UserLoginResponse:
    session = await service.user_login(body.email, body.password, client_ip)
    return UserLoginResponse(
        token=session.token,
        user_id=session.user_id,
        email=session.email,
        role=session.role,
    )


@router.post(
    "/users",
    response_model=UserProvisionedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: CreateUserRequest, service: ProvisioningDep, token: BearerToken
) -> UserProvisionedResponse:
    """Create a back-office user.

    Allowed with the setup key or a bearer token of a back-office admin.
    """
    user = await service.create_user(
        body.email, body.password, body.role, body.setup_key, token
    )
    return UserProvisionedResponse(user_id=user.id)


@router.post("/users/reset", response_model=UserProvisionedResponse)
async def reset_user(
    body: ResetUserRequest, service: ProvisioningDep
) -> UserProvisionedResponse:
    user = await service.reset_user(
        body.email, body.password, body.role, body.setup_key
    )
    return UserProvisionedResponse(user_id=user.id)
