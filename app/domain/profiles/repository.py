from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid

from app.core.permissions import CallerContext, Role
from app.domain.profiles.models import Profile
from app.infrastructure.row_security import RowSecuredRepository


async def resolve_caller_role(db: AsyncSession, caller_id: uuid.UUID) -> Optional[Role]:
    """Trusted lookup of the caller's own role.

    Reads the caller's profile directly, outside the profile table's
    policies. Every role-conditioned predicate relies on this single lookup.
    """
    result = await db.execute(select(Profile.role).where(Profile.id == caller_id))
    role = result.scalar_one_or_none()
    if role is None:
        return None
    return Role(role)


async def load_caller_context(db: AsyncSession, caller_id: uuid.UUID) -> CallerContext:
    """Build the CallerContext for an authenticated identity"""
    role = await resolve_caller_role(db, caller_id)
    return CallerContext(user_id=caller_id, role=role)


class ProfileRepository(RowSecuredRepository):
    """Repository for profile data access operations"""

    model = Profile

    async def get_own(self) -> Optional[Profile]:
        """Get the caller's own profile"""
        if self.caller.user_id is None:
            return None
        return await self.get(self.caller.user_id)

    async def list_by_role(self, role: Role, skip: int = 0, limit: int = 100):
        """Get visible profiles with the given role"""
        return await self.list(skip=skip, limit=limit, order_by=Profile.created_at, role=role)
