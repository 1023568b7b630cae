"""Authentication routes: accounts, admin login, password reset, profiles and logout."""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.auth import get_current_user, get_token
from eventdekho.core.limiter import limiter
from eventdekho.core.principal import Principal
from eventdekho.db.session import get_session
from eventdekho.schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileOut,
    ProfileResponse,
    ProfileUpdate,
    ResetPasswordRequest,
    UserCreate,
    UserOut,
)
from eventdekho.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    """
    Dependency injection for AuthService.

    Args:
        session: Database session

    Returns:
        AuthService instance
    """
    return AuthService(session)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def register(
    request: Request,
    payload: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new account and log it in.

    Rate limit: 5 requests per minute

    Returns:
        Message, access token and the public user record
    """
    user, token = await auth_service.register(payload)
    return AuthResponse(message="User registered successfully", token=token, user=UserOut.model_validate(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit("10/minute")
async def login(
    request: Request,
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Exchange email and password for an access token.

    Rate limit: 10 requests per minute
    """
    user, token = await auth_service.login(payload)
    return AuthResponse(message="Login successful", token=token, user=UserOut.model_validate(user))


@router.post("/admin/login", response_model=AuthResponse)
@limiter.limit("10/minute")
async def admin_login(
    request: Request,
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Log in the system admin (from the environment) or a stored admin account."""
    principal, token = await auth_service.admin_login(payload)
    return AuthResponse(message="Admin login successful", token=token, user=UserOut.model_validate(principal))


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit("3/minute")
async def forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Email a single-use password reset link valid for one hour.

    Rate limit: 3 requests per minute
    """
    await auth_service.forgot_password(payload.email)
    return MessageResponse(message="Password reset email sent")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    await auth_service.reset_password(payload)
    return MessageResponse(message="Password updated successfully")


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    principal: Principal = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    return ProfileResponse(user=await auth_service.get_profile(principal))


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    payload: ProfileUpdate,
    principal: Principal = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    profile = await auth_service.update_profile(principal, payload)
    return ProfileResponse(message="Profile updated successfully", user=profile)


@router.delete("/profile", response_model=MessageResponse)
async def delete_profile(
    principal: Principal = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Delete the caller's account and everything attached to it.

    Removes their comments, likes, registrations, reset tokens and the events
    they organize (with those events' comments, likes and registrations).
    """
    await auth_service.delete_account(principal)
    return MessageResponse(message="Account and all associated data deleted successfully")


@router.get("/profile/{user_id}", response_model=ProfileOut)
async def get_public_profile(
    user_id: str,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await auth_service.get_public_profile(user_id)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    principal: Principal = Depends(get_current_user),
    token: str = Depends(get_token),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Logout by revoking the presented token until it would have expired.
    """
    await auth_service.logout(token)
    return None
