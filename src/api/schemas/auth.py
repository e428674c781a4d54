"""Bodies of the authentication and user provisioning endpoints."""

from pydantic import BaseModel, Field

from src.domain.roles import AppRole


class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class AdminLoginResponse(BaseModel):
    success: bool = True
    token: str
    username: str


class UserLoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, examples=["ana@example.com"])
    password: str = Field(..., min_length=1)


class UserLoginResponse(BaseModel):
    success: bool = True
    token: str
    user_id: int
    email: str
    role: AppRole | None = None


class CreateUserRequest(BaseModel):
    """New back-office user.

    Email and password are optional here so the caller's authorization is
    checked before the body is; missing values are then reported as 400.
    """

    email: str | None = Field(default=None, max_length=255)
    password: str | None = None
    role: str | None = Field(
        default=None,
        description="admin, vendedor or financeiro; anything else becomes vendedor",
    )
    setup_key: str | None = None


class ResetUserRequest(BaseModel):
    email: str | None = Field(default=None, max_length=255)
    password: str | None = None
    role: str | None = Field(
        default=None, description="Granted only when the user has no role yet"
    )
    setup_key: str | None = None


class UserProvisionedResponse(BaseModel):
    success: bool = True
    user_id: int
