"""
DogPatch Backend - Authentication Dependencies
===============================================

What:  FastAPI dependencies that turn request credentials into a User.
How:   `get_current_user` resolves an `Authorization: Bearer <token>` header
       through the tokens table. `get_basic_credentials` reads the HTTP Basic
       header used by the login route.
Who:   Protected routes declare `user: User = Depends(get_current_user)`.

Both use auto_error=False so a missing header reaches our own
AuthenticationError handler and gets the standard error envelope.
"""

import logging

from fastapi import Depends
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBasic,
    HTTPBasicCredentials,
    HTTPBearer,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dogpatch.database import get_db_session
from dogpatch.exceptions import AuthenticationError
from dogpatch.models.token import Token
from dogpatch.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)
basic_scheme = HTTPBasic(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    Resolve the bearer token to its user.

    The user is loaded into the request's session, so services can modify it
    and the request commit persists the change.
    """
    if credentials is None:
        raise AuthenticationError()

    result = await db.execute(
        select(User).join(Token, Token.user_id == User.id).where(Token.token == credentials.credentials)
    )
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning("Rejected unknown bearer token")
        raise AuthenticationError(message="Invalid or expired token")
    return user


async def get_basic_credentials(
    credentials: HTTPBasicCredentials | None = Depends(basic_scheme),
) -> HTTPBasicCredentials:
    if credentials is None:
        raise AuthenticationError(message="Basic credentials required", scheme="Basic")
    return credentials
