"""
Admin authentication endpoints.

Login issues the signed admin token both in the http-only ``admin-token``
cookie and in the response body (for bearer use). Failed logins are audited.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.auth import (
    AdminUserRead,
    ChangePasswordRequest,
    LoginData,
    LoginRequest,
    TokenData,
)
from portfolio_cms.core.models.io.common import ApiResponse, MessageResponse
from portfolio_cms.core.security.tokens import TokenPayload, create_access_token
from portfolio_cms.server.core.config import settings
from portfolio_cms.server.core.rate_limit import limiter
from portfolio_cms.server.services.audit import AuditLogger, record_admin_action
from portfolio_cms.server.services.auth import AuthError, AuthService
from portfolio_cms.server.services.deps import client_ip, get_current_admin

logger = get_logger(__name__)

router = APIRouter(tags=["admin-auth"])


def _token_lifetime_seconds() -> int:
    return settings.jwt.expire_days * 24 * 60 * 60


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=_token_lifetime_seconds(),
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post(
    "/login",
    response_model=ApiResponse[LoginData],
    summary="Admin Login",
    description="Authenticate an administrator and issue a session token.",
    response_description="The admin profile and token.",
    responses={
        400: {"description": "Invalid input data"},
        401: {"description": "Invalid credentials or two-factor code"},
        429: {"description": "Too many login attempts"},
    },
)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[LoginData]:
    """
    Log in to the admin panel.

    - **email**: Admin email.
    - **password**: Admin password.
    - **otp**: TOTP or backup code; required when two-factor authentication is enabled.
    """
    audit = AuditLogger(session)
    try:
        user = await AuthService(session).authenticate(payload.email, payload.password, payload.otp)
    except AuthError as e:
        await audit.log_event(
            action="login_failed",
            resource="auth",
            user_email=payload.email,
            success=False,
            severity="warning",
            details={"reason": e.code},
            ip_address=client_ip(request),
        )
        raise HTTPException(status_code=e.status_code, detail={"message": e.message, "error": e.code}) from e

    token = create_access_token(user.id, user.email, user.name, user.role)
    set_auth_cookie(response, token)
    await audit.log_event(
        action="login",
        resource="auth",
        resource_id=user.id,
        user_email=user.email,
        ip_address=client_ip(request),
    )
    logger.info(f"Admin {user.email} logged in")
    return ApiResponse[LoginData](
        message="Login successful",
        data=LoginData(user=AdminUserRead.model_validate(user), token=token, expires_in=_token_lifetime_seconds()),
    )


@router.post("/logout", response_model=MessageResponse, summary="Admin Logout")
async def logout(response: Response) -> MessageResponse:
    """Clear the session cookie."""
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=ApiResponse[AdminUserRead],
    summary="Current Admin",
    responses={401: {"description": "Not authenticated"}},
)
async def me(
    admin: TokenPayload = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[AdminUserRead]:
    user = await AuthService(session).get_user(admin.sub)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Account no longer exists", "error": "INVALID_TOKEN"},
        )
    return ApiResponse[AdminUserRead](data=AdminUserRead.model_validate(user))


@router.post("/refresh", response_model=ApiResponse[TokenData], summary="Refresh Token")
async def refresh(response: Response, admin: TokenPayload = Depends(get_current_admin)) -> ApiResponse[TokenData]:
    """Issue a fresh token (and cookie) for the authenticated admin."""
    token = create_access_token(admin.sub, admin.email, admin.name, admin.role)
    set_auth_cookie(response, token)
    return ApiResponse[TokenData](data=TokenData(token=token, expires_in=_token_lifetime_seconds()))


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change Password",
    responses={400: {"description": "Current password incorrect or new password too weak"}},
)
async def change_password(
    request: Request,
    payload: ChangePasswordRequest,
    admin: TokenPayload = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    service = AuthService(session)
    user = await service.get_user(admin.sub)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin user not found")
    try:
        await service.change_password(user, payload.current_password, payload.new_password)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail={"message": e.message, "error": e.code}) from e
    await record_admin_action(session, request, "change_password", "admin_user", user.id, severity="warning")
    return MessageResponse(message="Password changed successfully")
