"""
Dependency Injection for authentication and storage
Project: Iron Hub (customer ledger backend)

FastAPI dependencies shared by the routers:
- the authenticated operator (audit actor)
- the unit of work for the configured storage backend
"""

from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from ironhub.core.config import settings
from ironhub.core.database import get_session_factory
from ironhub.core.security import decode_token
from ironhub.repositories.base import UnitOfWork
from ironhub.repositories.memory import InMemoryUnitOfWork, get_memory_store
from ironhub.repositories.sql import SqlAlchemyUnitOfWork

# OAuth2 scheme - reads the token from the Authorization header
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,
)


async def get_current_actor(
    token: Optional[str] = Depends(oauth2_scheme),
) -> str:
    """
    Dependency returning the email of the authenticated operator.

    The email is recorded as user_email on every audit entry.

    Raises:
        HTTPException 401: missing, invalid or expired token
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token not provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_data = decode_token(token)

    if token_data.type != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return token_data.sub


async def get_unit_of_work() -> AsyncGenerator[UnitOfWork, None]:
    """
    Dependency yielding one unit of work per request.

    memory: shares the process-wide MemoryStore
    postgres: wraps a fresh AsyncSession, closed after the request
    """
    if settings.storage_backend == "postgres":
        async with get_session_factory()() as session:
            yield SqlAlchemyUnitOfWork(session)
    else:
        yield InMemoryUnitOfWork(get_memory_store())


# Type aliases for common use
CurrentActor = Annotated[str, Depends(get_current_actor)]
UnitOfWorkDep = Annotated[UnitOfWork, Depends(get_unit_of_work)]


# Export
__all__ = [
    "get_current_actor",
    "get_unit_of_work",
    "oauth2_scheme",
    "CurrentActor",
    "UnitOfWorkDep",
]
