from typing import Optional
import uuid
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError
from app.core.permissions import ANONYMOUS, CallerContext
from app.core.security import verify_token
from app.domain.profiles.repository import load_caller_context
from app.infrastructure.database import get_db

bearer_scheme = HTTPBearer(auto_error=False)


def _caller_id_from_token(credentials: Optional[HTTPAuthorizationCredentials]) -> uuid.UUID:
    if credentials is None:
        raise AuthenticationError(message="Authentication required")

    payload = verify_token(credentials.credentials, "access")
    if not payload:
        raise AuthenticationError(message="Invalid or expired token")

    try:
        return uuid.UUID(payload["sub"])
    except (KeyError, ValueError):
        raise AuthenticationError(message="Invalid or expired token")


async def get_authenticated_caller(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CallerContext:
    """Resolve the bearer token to a caller; the role is None without a profile"""
    caller_id = _caller_id_from_token(credentials)
    return await load_caller_context(db, caller_id)


async def get_current_caller(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CallerContext:
    """Resolve the bearer token to a caller with its profile role"""
    caller = await get_authenticated_caller(db=db, credentials=credentials)

    # No profile means the application treats the user as absent
    if caller.role is None:
        raise AuthenticationError(message="Profile not found for this identity")
    return caller


async def get_optional_caller(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CallerContext:
    """Like get_current_caller, but anonymous requests are allowed"""
    if credentials is None:
        return ANONYMOUS
    return await get_current_caller(db=db, credentials=credentials)
