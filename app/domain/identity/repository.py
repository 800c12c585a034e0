from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from datetime import datetime, timezone
from app.domain.identity.models import IdentityUser
import uuid


class IdentityRepository:
    """Repository for identity store access.

    Identities are not covered by row-level policies; only the signup and
    login flows touch this table.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def add(self, identity_data: dict) -> IdentityUser:
        """Stage a new identity; the caller owns the transaction"""
        identity = IdentityUser(**identity_data)
        self.db.add(identity)
        return identity

    async def get_by_email(self, email: str) -> Optional[IdentityUser]:
        """Get identity by email"""
        result = await self.db.execute(
            select(IdentityUser).where(IdentityUser.email == email)
        )
        return result.scalar_one_or_none()

    async def update_last_sign_in(self, identity_id: uuid.UUID) -> None:
        """Update identity's last sign-in timestamp"""
        await self.db.execute(
            update(IdentityUser)
            .where(IdentityUser.id == identity_id)
            .values(last_sign_in_at=datetime.now(timezone.utc))
        )
        await self.db.commit()
