from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime
import uuid

from app.core.permissions import Role


class ProfileCreate(BaseModel):
    """Schema for inserting a profile for an existing identity"""
    id: uuid.UUID
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    role: Role = Role.PATIENT
    profile_picture_url: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile"""
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    profile_picture_url: Optional[str] = None


class ProfileAdminUpdate(ProfileUpdate):
    """Profile update that may also change the role (admins only)"""
    role: Optional[Role] = None


class ProfileResponse(BaseModel):
    """Schema for profile response data"""
    id: uuid.UUID
    email: EmailStr
    full_name: str
    role: Role
    profile_picture_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
