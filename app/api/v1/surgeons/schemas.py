from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
import uuid


class SurgeonDetailsCreate(BaseModel):
    """Schema for a surgeon's directory entry"""
    user_id: uuid.UUID
    specialty: str = Field(..., min_length=1, max_length=200)
    hospital_affiliation: str = Field(..., min_length=1, max_length=200)
    years_of_experience: int = Field(0, ge=0)
    certifications: Optional[List[str]] = None
    bio: Optional[str] = None
    consultation_fee: Optional[float] = Field(None, ge=0)


class SurgeonDetailsUpdate(BaseModel):
    specialty: Optional[str] = Field(None, min_length=1, max_length=200)
    hospital_affiliation: Optional[str] = Field(None, min_length=1, max_length=200)
    years_of_experience: Optional[int] = Field(None, ge=0)
    certifications: Optional[List[str]] = None
    bio: Optional[str] = None
    consultation_fee: Optional[float] = Field(None, ge=0)


class SurgeonDetailsResponse(BaseModel):
    user_id: uuid.UUID
    specialty: str
    hospital_affiliation: str
    years_of_experience: int
    certifications: Optional[List[str]] = None
    bio: Optional[str] = None
    consultation_fee: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
