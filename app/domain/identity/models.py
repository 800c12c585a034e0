from sqlalchemy import Column, String, DateTime, JSON, Uuid
from sqlalchemy.sql import func
from app.infrastructure.database import Base
import uuid


class IdentityUser(Base):
    """Authenticated identity registry.

    Inserting a row fires the profile-provisioning trigger registered in
    ``app.domain.profiles.provisioning``.
    """
    __tablename__ = "identities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Free-form signup metadata (full_name, role, ...)
    raw_user_meta_data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_sign_in_at = Column(DateTime(timezone=True))

    def verify_password(self, password: str) -> bool:
        """Verify password"""
        from app.core.security import verify_password
        return verify_password(password, self.password_hash)
