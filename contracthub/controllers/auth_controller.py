"""
Auth controller: register, login, logout, profile & password.

Register, login, logout and status are PUBLIC; the rest need a valid
credential.  Login sets the auth cookie in addition to returning the
token, so browser clients can rely on either.
"""

from fastapi import APIRouter, Depends, Response, status

from contracthub.core.config import settings
from contracthub.rbac.dependencies import get_current_principal, get_optional_principal
from contracthub.rbac.principal import Principal
from contracthub.repositories.dependencies import get_user_repo
from contracthub.repositories.user_repo import UserRepository
from contracthub.schemas import (
    ApiResponse,
    AuthPayload,
    AuthStatusOut,
    ChangePasswordRequest,
    CustomerOut,
    LoginRequest,
    MeOut,
    ProfileUpdate,
    RegisterRequest,
    UserOut,
)
from contracthub.services import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=not settings.is_development,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=ApiResponse[AuthPayload], status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    response: Response,
    users: UserRepository = Depends(get_user_repo),
):
    user, token = await auth_service.register_user(body.name, body.email, body.password, users)
    _set_auth_cookie(response, token)
    return ApiResponse(
        data=AuthPayload(user=UserOut.model_validate(user), token=token),
        message="User registered successfully",
    )


@router.post("/login", response_model=ApiResponse[AuthPayload])
async def login(
    body: LoginRequest,
    response: Response,
    users: UserRepository = Depends(get_user_repo),
):
    """Authenticate with email + password → token (also set as cookie)."""
    user, token = await auth_service.authenticate(body.email, body.password, users)
    _set_auth_cookie(response, token)
    return ApiResponse(
        data=AuthPayload(user=UserOut.model_validate(user), token=token),
        message="Login successful",
    )


@router.post("/logout", response_model=ApiResponse[None])
async def logout(response: Response):
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return ApiResponse(message="Logged out successfully")


@router.get("/me", response_model=ApiResponse[MeOut])
async def me(principal: Principal = Depends(get_current_principal)):
    return ApiResponse(
        data=MeOut(
            user=UserOut.model_validate(principal.user),
            customer=CustomerOut.model_validate(principal.customer) if principal.customer else None,
            permissions=sorted(p.value for p in principal.permissions),
        )
    )


@router.put("/profile", response_model=ApiResponse[UserOut])
async def update_profile(
    body: ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    users: UserRepository = Depends(get_user_repo),
):
    user = await auth_service.update_profile(principal.user, users, name=body.name, email=body.email)
    return ApiResponse(data=UserOut.model_validate(user), message="Profile updated successfully")


@router.put("/change-password", response_model=ApiResponse[None])
async def change_password(
    body: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    users: UserRepository = Depends(get_user_repo),
):
    await auth_service.change_password(principal.user, body.current_password, body.new_password, users)
    return ApiResponse(message="Password changed successfully")


@router.get("/status", response_model=ApiResponse[AuthStatusOut])
async def auth_status(principal: Principal | None = Depends(get_optional_principal)):
    return ApiResponse(
        data=AuthStatusOut(
            is_authenticated=principal is not None,
            user=UserOut.model_validate(principal.user) if principal else None,
        )
    )
