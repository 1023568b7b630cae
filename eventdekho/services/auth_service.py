"""Authentication service for accounts, profiles, password resets and JWT tokens."""
import secrets
from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.core.config import settings
from eventdekho.core.logging import logger
from eventdekho.core.principal import Principal, SystemAdmin
from eventdekho.core.security import (
    create_system_admin_token,
    create_user_token,
    generate_reset_token,
    hash_password,
    revoke_token,
    validate_password,
    verify_password,
)
from eventdekho.db.models.enums import RoleEnum
from eventdekho.db.models.user import User
from eventdekho.db.repositories import (
    create_reset_token,
    create_user as db_create_user,
    delete_reset_token,
    delete_user_cascade,
    get_reset_token,
    get_user,
    get_user_by_email as db_get_user_by_email,
    purge_expired_reset_tokens,
    update_user,
)
from eventdekho.schemas import (
    LoginRequest,
    ProfileOut,
    ProfileUpdate,
    ResetPasswordRequest,
    UserCreate,
)
from eventdekho.services import email_service

PROFILE_FIELDS = ("avatar", "bio", "location", "website", "phone")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def system_admin_profile(admin: SystemAdmin, changes: Optional[ProfileUpdate] = None) -> ProfileOut:
    """The virtual admin has no users row, so its profile is synthesized."""
    changes = changes or ProfileUpdate()
    return ProfileOut(
        id=admin.id,
        name=changes.name or admin.name,
        email=admin.email,
        role=RoleEnum.admin,
        verified=True,
        type=None,
        avatar=changes.avatar or None,
        bio=changes.bio or "",
        location=changes.location or "",
        website=changes.website or "",
        phone=changes.phone or "",
    )


class AuthService:
    """
    Service layer for authentication operations.

    Handles registration, login (users and the system admin), password
    resets, profile reads/updates, account deletion and logout.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def register(self, payload: UserCreate) -> Tuple[User, str]:
        """
        Register a new account and issue its first token.

        Returns:
            (created user, access token)

        Raises:
            HTTPException: If required fields are missing, the password is weak,
                the email is taken or an admin account is requested
        """
        if not payload.name or not payload.email or not payload.password:
            raise HTTPException(status_code=400, detail="Name, email, and password are required")

        if payload.role == RoleEnum.admin:
            raise HTTPException(status_code=403, detail="Admin accounts cannot be self-registered")

        try:
            validate_password(payload.password)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        email = normalize_email(payload.email)
        existing = await db_get_user_by_email(self.session, email)
        if existing:
            raise HTTPException(status_code=400, detail="User with this email already exists")

        fields = payload.model_dump(exclude={"name", "email", "password", "role"}, exclude_none=True)
        user = await db_create_user(self.session, {
            **fields,
            "name": payload.name.strip(),
            "email": email,
            "hashed_password": hash_password(payload.password),
            "role": payload.role or RoleEnum.user,
            "verified": False,
        })
        logger.info(f"Registered {user.role.value} account {user.id}")
        return user, create_user_token(user)

    async def login(self, payload: LoginRequest) -> Tuple[User, str]:
        if not payload.email or not payload.password:
            raise HTTPException(status_code=400, detail="Email and password are required")

        user = await db_get_user_by_email(self.session, normalize_email(payload.email))
        if not user or not verify_password(payload.password, user.hashed_password):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
        return user, create_user_token(user)

    async def admin_login(self, payload: LoginRequest) -> Tuple[Principal, str]:
        """
        Log in either the environment-configured system admin or a stored admin user.

        Raises:
            HTTPException: 401 if neither matches
        """
        invalid = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin credentials")
        if not payload.email or not payload.password:
            raise invalid

        if (
            settings.ADMIN_EMAIL
            and settings.ADMIN_PASSWORD
            and secrets.compare_digest(payload.email.encode(), settings.ADMIN_EMAIL.encode())
            and secrets.compare_digest(payload.password.encode(), settings.ADMIN_PASSWORD.encode())
        ):
            logger.info("System admin logged in")
            return SystemAdmin(email=settings.ADMIN_EMAIL), create_system_admin_token(settings.ADMIN_EMAIL)

        user = await db_get_user_by_email(self.session, normalize_email(payload.email))
        if not user or user.role != RoleEnum.admin or not verify_password(payload.password, user.hashed_password):
            raise invalid
        return user, create_user_token(user)

    async def forgot_password(self, email: Optional[str]) -> None:
        user = await db_get_user_by_email(self.session, normalize_email(email))
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        await purge_expired_reset_tokens(self.session)
        row = await create_reset_token(self.session, str(user.id), generate_reset_token())
        await email_service.send_password_reset_email(user.email, row.token)

    async def reset_password(self, payload: ResetPasswordRequest) -> None:
        row = await get_reset_token(self.session, payload.token) if payload.token else None
        if not row:
            raise HTTPException(status_code=400, detail="Invalid or expired token")

        if row.is_expired:
            await delete_reset_token(self.session, row)
            raise HTTPException(status_code=400, detail="Token has expired")

        try:
            validate_password(payload.password or "")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        user = await get_user(self.session, row.user_id)
        if not user:
            await delete_reset_token(self.session, row)
            raise HTTPException(status_code=400, detail="Invalid or expired token")

        await update_user(self.session, user, {"hashed_password": hash_password(payload.password)})
        await delete_reset_token(self.session, row)
        logger.info(f"Password reset for user {user.id}")

    async def get_profile(self, principal: Principal) -> ProfileOut:
        if isinstance(principal, SystemAdmin):
            return system_admin_profile(principal)
        return ProfileOut.model_validate(principal)

    async def update_profile(self, principal: Principal, payload: ProfileUpdate) -> ProfileOut:
        if isinstance(principal, SystemAdmin):
            return system_admin_profile(principal, payload)

        changes = {}
        if payload.name:
            changes["name"] = payload.name
        for field in PROFILE_FIELDS:
            if field in payload.model_fields_set:
                changes[field] = getattr(payload, field)
        user = await update_user(self.session, principal, changes)
        return ProfileOut.model_validate(user)

    async def get_public_profile(self, user_id: str) -> ProfileOut:
        user = await get_user(self.session, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return ProfileOut.model_validate(user)

    async def delete_account(self, principal: Principal) -> None:
        if isinstance(principal, SystemAdmin):
            raise HTTPException(status_code=403, detail="System Admin account cannot be deleted via the API.")
        await delete_user_cascade(self.session, principal)

    async def logout(self, token: str) -> None:
        await revoke_token(token)
