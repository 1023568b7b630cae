from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from eventdekho.db.session import get_session
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from eventdekho.db.models.base import is_valid_id
from eventdekho.db.models.user import User
from eventdekho.core.config import settings
from eventdekho.core.logging import logger
from eventdekho.core.principal import Principal, SystemAdmin
from eventdekho.core.security import SYSTEM_ADMIN_ID, TokenExpiredError, decode_token, is_token_revoked

# auto_error=False so a missing header gets our own 401 message instead of FastAPI's 403
security = HTTPBearer(auto_error=False)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def resolve_principal(token: str, session: AsyncSession) -> Principal:
    """
    Turn a bearer token into the calling principal.

    Raises:
        HTTPException: 401 with the reason the token was rejected
    """
    if await is_token_revoked(token):
        raise _unauthorized("Token has been revoked")

    try:
        payload = decode_token(token)
    except TokenExpiredError:
        raise _unauthorized("Token expired")
    except ValueError:
        raise _unauthorized("Token is malformed")

    if payload.get("type") != "access":
        raise _unauthorized("Token is malformed")

    subject = payload.get("sub")
    if subject == SYSTEM_ADMIN_ID:
        if payload.get("virtual") and payload.get("role") == "admin":
            return SystemAdmin(email=payload.get("email") or settings.ADMIN_EMAIL or "")
        raise _unauthorized("Token is not valid")

    if not is_valid_id(subject):
        raise _unauthorized("Token is not valid")

    q = await session.execute(select(User).where(User.id == subject))
    user = q.scalars().first()
    if not user:
        logger.warning(f"Token presented for unknown user {subject}")
        raise _unauthorized("Token is not valid")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> Principal:
    """
    Get the calling principal from the bearer token.

    Returns:
        A stored User, or the SystemAdmin for virtual admin tokens

    Raises:
        HTTPException: If the token is missing, invalid, expired or revoked
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("No token, authorization denied")
    return await resolve_principal(credentials.credentials, session)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> Optional[Principal]:
    """Like get_current_user, but anonymous or bad tokens resolve to None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await resolve_principal(credentials.credentials, session)
    except HTTPException as e:
        logger.debug(f"Ignoring optional bearer token: {e.detail}")
        return None


async def get_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Optional[str]:
    return credentials.credentials if credentials else None


async def admin_required(principal: Principal = Depends(get_current_user)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return principal
