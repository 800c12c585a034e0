from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
import uuid

from app.domain.clinical.models import CasePriority, CaseStatus


class SurgicalCaseCreate(BaseModel):
    """Schema for opening a surgical case"""
    patient_id: uuid.UUID
    surgeon_id: Optional[uuid.UUID] = None
    procedure_name: str = Field(..., min_length=1, max_length=255)
    scheduled_date: Optional[datetime] = None
    status: CaseStatus = CaseStatus.PROPOSED
    priority: Optional[CasePriority] = None
    estimated_duration_minutes: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = None


class SurgicalCaseUpdate(BaseModel):
    surgeon_id: Optional[uuid.UUID] = None
    procedure_name: Optional[str] = Field(None, min_length=1, max_length=255)
    scheduled_date: Optional[datetime] = None
    status: Optional[CaseStatus] = None
    priority: Optional[CasePriority] = None
    estimated_duration_minutes: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = None


class SurgicalCaseResponse(BaseModel):
    id: uuid.UUID
    patient_id: uuid.UUID
    surgeon_id: Optional[uuid.UUID] = None
    procedure_name: str
    scheduled_date: Optional[datetime] = None
    status: CaseStatus
    priority: Optional[CasePriority] = None
    estimated_duration_minutes: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
