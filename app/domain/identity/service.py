from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import logging
import uuid

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ProvisioningError, UniqueViolationError
from app.core.security import create_access_token, get_password_hash
from app.domain.identity.models import IdentityUser
from app.domain.identity.repository import IdentityRepository
from app.domain.profiles import provisioning  # noqa: F401  registers the signup trigger

logger = logging.getLogger(__name__)


class IdentityService:
    """Service layer for signup and login"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.identity_repo = IdentityRepository(db)

    async def register(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None,
        identity_id: Optional[uuid.UUID] = None
    ) -> IdentityUser:
        """Create an identity and, through the signup trigger, its profile.

        Both rows are written in one transaction: if the profile cannot be
        provisioned the identity is not created either.
        """
        existing = await self.identity_repo.get_by_email(email)
        if existing:
            raise UniqueViolationError(field="email", message="Email already registered")

        identity = self.identity_repo.add({
            "id": identity_id or uuid.uuid4(),
            "email": email,
            "password_hash": get_password_hash(password),
            "raw_user_meta_data": dict(metadata or {}),
        })

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            text = str(e.orig).lower()
            if "profiles" not in text and ("unique" in text or "duplicate" in text):
                raise UniqueViolationError(field="email", message="Email already registered") from e
            logger.error(f"Profile provisioning failed for {email}: {e.orig}")
            raise ProvisioningError(details={"email": email}) from e

        await self.db.refresh(identity)
        logger.info(f"Registered identity {identity.id}")
        return identity

    async def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        """Check credentials and issue an access token"""
        identity = await self.identity_repo.get_by_email(email)
        if not identity or not identity.verify_password(password):
            raise AuthenticationError(message="Invalid email or password")

        await self.identity_repo.update_last_sign_in(identity.id)

        access_token = create_access_token(str(identity.id), {"email": identity.email})
        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }
