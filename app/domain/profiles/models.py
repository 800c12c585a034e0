from sqlalchemy import Column, String, Text, DateTime, ForeignKey, CheckConstraint, Index, Uuid
from sqlalchemy.sql import func
from app.core.permissions import Role
from app.infrastructure.database import Base


class Profile(Base):
    """Application profile, one per identity"""
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("role IN ('patient', 'surgeon', 'admin')", name="ck_profiles_role"),
        Index("idx_profiles_role", "role"),
    )
    __enum_columns__ = {"role": Role}

    id = Column(Uuid, ForeignKey("identities.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    profile_picture_url = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Profile {self.id} {self.role}>"
