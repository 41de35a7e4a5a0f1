"""
Authentication service
Project: Iron Hub (customer ledger backend)

Login of the portal operator. The operator account comes from the
configuration (OPERATOR_EMAIL / OPERATOR_PASSWORD_HASH): there is no user
table.
"""

import logging
from typing import Optional

from fastapi import HTTPException, status

from ironhub.core.config import settings
from ironhub.core.security import create_access_token, verify_password
from ironhub.schemas.token import LoginRequest, TokenResponse

# Logger for this module
logger = logging.getLogger(__name__)


class AuthService:
    """Service for operator authentication."""

    def __init__(
        self,
        operator_email: Optional[str] = None,
        operator_password_hash: Optional[str] = None,
    ) -> None:
        self.operator_email = (operator_email or settings.operator_email).lower()
        self.operator_password_hash = operator_password_hash or settings.operator_password_hash

    def login(self, data: LoginRequest) -> TokenResponse:
        """
        Check the operator credentials and issue an access token.

        Args:
            data: Operator credentials

        Returns:
            TokenResponse with the access token

        Raises:
            HTTPException 401: wrong credentials or no operator configured
        """
        if not self.operator_password_hash:
            logger.warning("Login attempt while no operator password is configured")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Operator login is not configured",
                headers={"WWW-Authenticate": "Bearer"},
            )

        email = data.email.strip().lower()
        if email != self.operator_email or not verify_password(data.password, self.operator_password_hash):
            logger.warning("Failed login for %s", email)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        logger.info("Operator %s logged in", email)
        return TokenResponse(access_token=create_access_token(email), token_type="bearer")


def get_auth_service() -> AuthService:
    """Factory used as a FastAPI dependency."""
    return AuthService()
