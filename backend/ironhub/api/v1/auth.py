"""
Router for authentication
Project: Iron Hub (customer ledger backend)

Operator login. The returned bearer token is required by every write
endpoint; its subject becomes the actor of the audit entries.
"""

from fastapi import APIRouter, Depends, status

from ironhub.core.deps import CurrentActor
from ironhub.schemas.token import LoginRequest, TokenResponse
from ironhub.services.auth_service import AuthService, get_auth_service

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Operator login",
)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Exchange the operator credentials for an access token.

    Raises:
        HTTPException 401: wrong credentials
    """
    return service.login(data)


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    summary="Current operator",
)
async def get_me(actor: CurrentActor) -> dict[str, str]:
    """Email of the operator the token was issued to."""
    return {"email": actor}
