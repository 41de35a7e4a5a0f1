"""
Security helpers for JWT authentication
Project: Iron Hub (customer ledger backend)

Password hashing and JWT token handling for the portal operator.
"""

from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import HTTPException, status
from jose import JWTError, jwt

from ironhub.core.config import settings
from ironhub.schemas.token import TokenPayload


def hash_password(password: str) -> str:
    """
    Hash a plain-text password with bcrypt.

    Args:
        password: Plain-text password

    Returns:
        bcrypt hash as a string
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a plain-text password against a bcrypt hash.

    Returns:
        True when the password matches, False otherwise (including
        malformed hashes)
    """
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(subject: str, role: str = "admin") -> str:
    """
    Create a signed JWT access token.

    Args:
        subject: Operator email, used as the audit actor
        role: Operator role

    Returns:
        Encoded JWT
    """
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.access_token_expire_minutes
    )

    payload = {
        "sub": subject,
        "role": role,
        "exp": expire,
        "type": "access",
    }

    return jwt.encode(
        payload,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT.

    Args:
        token: Encoded JWT

    Returns:
        TokenPayload with the token claims

    Raises:
        HTTPException 401: invalid, expired or subject-less token
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid or expired token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing subject",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TokenPayload(
        sub=payload["sub"],
        role=payload.get("role", "admin"),
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        type=payload.get("type", "access"),
    )


__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
