"""
Two-factor authentication management for the signed-in admin.

Setup returns a TOTP secret, its provisioning URI and one-time backup codes;
2FA only becomes active once a first code is confirmed through ``enable``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.database.entities.admin_users import AdminUser
from portfolio_cms.core.models.io.common import ApiResponse, MessageResponse
from portfolio_cms.core.models.io.operations import TwoFactorSetupResponse, TwoFactorStatus, TwoFactorTokenRequest
from portfolio_cms.core.security.tokens import TokenPayload
from portfolio_cms.server.services.audit import record_admin_action
from portfolio_cms.server.services.auth import AuthError, AuthService
from portfolio_cms.server.services.deps import get_current_admin

router = APIRouter(tags=["admin-security"])


def _auth_http_error(e: AuthError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail={"message": e.message, "error": e.code})


async def _current_user(service: AuthService, admin: TokenPayload) -> AdminUser:
    user = await service.get_user(admin.sub)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin user not found")
    return user


@router.get("/status", response_model=ApiResponse[TwoFactorStatus], summary="Two-Factor Status")
async def two_factor_status(
    admin: TokenPayload = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[TwoFactorStatus]:
    service = AuthService(session)
    user = await _current_user(service, admin)
    return ApiResponse[TwoFactorStatus](data=service.two_factor_status(user))


@router.post(
    "/setup",
    response_model=ApiResponse[TwoFactorSetupResponse],
    summary="Start Two-Factor Setup",
    description="Generate a TOTP secret, provisioning URI and backup codes. The codes are shown only once.",
    responses={400: {"description": "Two-factor authentication already enabled"}},
)
async def setup_two_factor(
    request: Request,
    admin: TokenPayload = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[TwoFactorSetupResponse]:
    service = AuthService(session)
    user = await _current_user(service, admin)
    try:
        setup = await service.setup_two_factor(user)
    except AuthError as e:
        raise _auth_http_error(e) from e
    await record_admin_action(session, request, "two_factor_setup", "admin_user", user.id, severity="warning")
    return ApiResponse[TwoFactorSetupResponse](data=setup)


@router.post(
    "/enable",
    response_model=MessageResponse,
    summary="Enable Two-Factor Authentication",
    responses={400: {"description": "Setup not started or invalid code"}},
)
async def enable_two_factor(
    request: Request,
    payload: TwoFactorTokenRequest,
    admin: TokenPayload = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    """
    Confirm the authenticator app and switch 2FA on.

    - **token**: Current 6-digit code from the authenticator app.
    """
    service = AuthService(session)
    user = await _current_user(service, admin)
    try:
        await service.enable_two_factor(user, payload.token)
    except AuthError as e:
        raise _auth_http_error(e) from e
    await record_admin_action(session, request, "two_factor_enabled", "admin_user", user.id, severity="warning")
    return MessageResponse(message="Two-factor authentication enabled")


@router.post(
    "/verify",
    response_model=ApiResponse[dict],
    summary="Verify Two-Factor Code",
    description="Check a TOTP code or consume a backup code.",
)
async def verify_two_factor(
    payload: TwoFactorTokenRequest,
    admin: TokenPayload = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[dict]:
    service = AuthService(session)
    user = await _current_user(service, admin)
    try:
        valid = await service.verify_second_factor(user, payload.token)
    except AuthError as e:
        raise _auth_http_error(e) from e
    if not valid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Invalid two-factor authentication code", "error": "INVALID_OTP"},
        )
    return ApiResponse[dict](message="Code verified", data={"valid": True})


@router.post(
    "/disable",
    response_model=MessageResponse,
    summary="Disable Two-Factor Authentication",
    responses={400: {"description": "Two-factor authentication not enabled or invalid code"}},
)
async def disable_two_factor(
    request: Request,
    payload: TwoFactorTokenRequest,
    admin: TokenPayload = Depends(get_current_admin),
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    service = AuthService(session)
    user = await _current_user(service, admin)
    try:
        await service.disable_two_factor(user, payload.token)
    except AuthError as e:
        raise _auth_http_error(e) from e
    await record_admin_action(session, request, "two_factor_disabled", "admin_user", user.id, severity="critical")
    return MessageResponse(message="Two-factor authentication disabled")
