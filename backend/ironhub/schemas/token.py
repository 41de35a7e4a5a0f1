"""
Pydantic schemas for JWT authentication
Project: Iron Hub (customer ledger backend)
"""

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Operator credentials."""

    email: str = Field(..., min_length=3, max_length=255, description="Operator email")
    password: str = Field(..., min_length=1, max_length=128, description="Operator password")


class TokenResponse(BaseModel):
    """
    Response carrying the access token.

    Attributes:
        access_token: JWT access token
        token_type: Token type (always bearer)
    """

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(
        default="bearer",
        description="Token type",
    )


class TokenPayload(BaseModel):
    """
    Claims carried by an access token.

    Attributes:
        sub: Subject - operator email
        role: Operator role
        exp: Expiration timestamp
        type: Token type ("access")
    """

    sub: str = Field(..., description="Operator email")
    role: str = Field(..., description="Operator role")
    exp: datetime = Field(..., description="Expiration timestamp")
    type: str = Field(..., description="Token type")


__all__ = [
    "LoginRequest",
    "TokenResponse",
    "TokenPayload",
]
