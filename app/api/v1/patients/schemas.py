from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, date
import uuid


class PersonalInfo(BaseModel):
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class PhysicalInfo(BaseModel):
    height_cm: Optional[float] = Field(None, gt=0)
    weight_kg: Optional[float] = Field(None, gt=0)
    blood_type: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class LifestyleInfo(BaseModel):
    smoking_status: Optional[str] = None
    alcohol_consumption: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class PatientDetailsCreate(BaseModel):
    """Schema for creating patient details"""
    user_id: uuid.UUID
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    physical_info: PhysicalInfo = Field(default_factory=PhysicalInfo)
    lifestyle_info: LifestyleInfo = Field(default_factory=LifestyleInfo)


class PatientDetailsUpdate(BaseModel):
    """Schema for updating patient details; each bag is replaced whole"""
    personal_info: Optional[PersonalInfo] = None
    physical_info: Optional[PhysicalInfo] = None
    lifestyle_info: Optional[LifestyleInfo] = None


class PatientDetailsResponse(BaseModel):
    user_id: uuid.UUID
    personal_info: dict
    physical_info: dict
    lifestyle_info: dict
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VitalSignsCreate(BaseModel):
    """Schema for recording a vital-sign measurement"""
    patient_id: uuid.UUID
    heart_rate: int = Field(..., ge=0)
    systolic_bp: int = Field(..., ge=0)
    diastolic_bp: int = Field(..., ge=0)
    body_temperature_celsius: float
    respiratory_rate: int = Field(..., ge=0)
    notes: Optional[str] = None


class VitalSignsUpdate(BaseModel):
    heart_rate: Optional[int] = Field(None, ge=0)
    systolic_bp: Optional[int] = Field(None, ge=0)
    diastolic_bp: Optional[int] = Field(None, ge=0)
    body_temperature_celsius: Optional[float] = None
    respiratory_rate: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class VitalSignsResponse(BaseModel):
    id: uuid.UUID
    patient_id: uuid.UUID
    heart_rate: int
    systolic_bp: int
    diastolic_bp: int
    body_temperature_celsius: float
    respiratory_rate: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SurgicalHistoryCreate(BaseModel):
    """Schema for recording a past procedure"""
    patient_id: uuid.UUID
    surgeon_id: Optional[uuid.UUID] = None
    procedure_name: str = Field(..., min_length=1, max_length=255)
    hospital: str = Field(..., min_length=1, max_length=255)
    surgery_date: date
    outcome: Optional[str] = None
    complications: Optional[str] = None
    notes: Optional[str] = None


class SurgicalHistoryUpdate(BaseModel):
    surgeon_id: Optional[uuid.UUID] = None
    procedure_name: Optional[str] = Field(None, min_length=1, max_length=255)
    hospital: Optional[str] = Field(None, min_length=1, max_length=255)
    surgery_date: Optional[date] = None
    outcome: Optional[str] = None
    complications: Optional[str] = None
    notes: Optional[str] = None


class SurgicalHistoryResponse(BaseModel):
    id: uuid.UUID
    patient_id: uuid.UUID
    surgeon_id: Optional[uuid.UUID] = None
    procedure_name: str
    hospital: str
    surgery_date: date
    outcome: Optional[str] = None
    complications: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
