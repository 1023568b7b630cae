"""
Security primitives: password hashing, JWT access tokens and token revocation.
"""
import secrets
import time
from datetime import datetime, timedelta
from typing import Optional, Dict
from jose import jwt, JWTError
from passlib.context import CryptContext
from eventdekho.core.config import settings
from eventdekho.cache.redis_client import cache

SYSTEM_ADMIN_ID = "admin-env"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 6


class TokenExpiredError(ValueError):
    """Raised by decode_token when the signature is valid but the token expired."""


def validate_password(password: str) -> None:
    """
    Validate password strength.

    Raises:
        ValueError: If password doesn't meet requirements
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode; must include ``sub``
        expires_delta: Optional custom lifetime (defaults to ACCESS_TOKEN_EXPIRE_DAYS)

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role.value})


def create_system_admin_token(email: str) -> str:
    return create_access_token(
        {"sub": SYSTEM_ADMIN_ID, "email": email, "role": "admin", "virtual": True},
        expires_delta=timedelta(hours=settings.ADMIN_TOKEN_EXPIRE_HOURS),
    )


def decode_token(token: str) -> Dict:
    """
    Decode and validate a JWT token.

    Raises:
        TokenExpiredError: If the token has expired
        ValueError: If the token is malformed or has a bad signature
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError("Token has expired")
    except JWTError as e:
        raise ValueError(f"Invalid token: {str(e)}")

    if "sub" not in payload:
        raise ValueError("Invalid token payload: missing 'sub' field")
    return payload


def generate_reset_token() -> str:
    """64 hex characters from 32 random bytes."""
    return secrets.token_hex(32)


async def revoke_token(token: str, expiry: Optional[int] = None) -> bool:
    """
    Add token to revocation list in Redis until it would have expired anyway.

    Args:
        token: Token to revoke
        expiry: Optional TTL in seconds (if not provided, calculated from token exp)

    Returns:
        True if successful
    """
    try:
        if expiry:
            await cache.set(f"revoked_token:{token}", True, expire=expiry)
        else:
            payload = decode_token(token)
            exp = payload.get("exp")
            if exp:
                ttl = exp - int(time.time())
                if ttl > 0:
                    await cache.set(f"revoked_token:{token}", True, expire=ttl)
        return True
    except ValueError:
        return False


async def is_token_revoked(token: str) -> bool:
    return await cache.exists(f"revoked_token:{token}")
