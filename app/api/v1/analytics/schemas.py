from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
import uuid

from app.domain.analytics.models import Season


class HistoricalDataCreate(BaseModel):
    """Schema for one week of surgical volume"""
    hospital_id: str = Field(..., min_length=1, max_length=50)
    week_number: int = Field(..., ge=1, le=53)
    year: int = Field(..., ge=1900)
    surgical_volume: int = Field(..., ge=0)
    specialty: Optional[str] = Field(None, max_length=200)
    season: Optional[Season] = None


class HistoricalDataUpdate(BaseModel):
    hospital_id: Optional[str] = Field(None, min_length=1, max_length=50)
    week_number: Optional[int] = Field(None, ge=1, le=53)
    year: Optional[int] = Field(None, ge=1900)
    surgical_volume: Optional[int] = Field(None, ge=0)
    specialty: Optional[str] = Field(None, max_length=200)
    season: Optional[Season] = None


class HistoricalDataResponse(BaseModel):
    id: uuid.UUID
    hospital_id: str
    week_number: int
    year: int
    surgical_volume: int
    specialty: Optional[str] = None
    season: Optional[Season] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
