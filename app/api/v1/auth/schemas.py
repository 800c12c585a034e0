from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Dict, Optional
from datetime import datetime
import uuid

from app.core.permissions import Role


class SignupRequest(BaseModel):
    """Schema for identity signup.

    ``metadata`` is copied to the identity as-is; ``full_name`` and ``role``
    are read from it when the profile is provisioned.
    """
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=8, max_length=72)
    metadata: Dict[str, str] = Field(default_factory=dict)


class SignupResponse(BaseModel):
    """Schema for the created identity and its provisioned profile"""
    id: uuid.UUID
    email: EmailStr
    full_name: Optional[str] = None
    role: Optional[Role] = None
    created_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    """Schema for login request"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Schema for token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int

    model_config = ConfigDict(from_attributes=True)
