"""
Clinical Domain Models

Implements the database models for:
- Patient details (personal, physical and lifestyle information)
- Surgeon details (public directory entry)
- Vital signs
- Surgical history
- Surgical cases
"""

from sqlalchemy import (
    Column, String, Date, DateTime, ForeignKey,
    Integer, Text, Numeric, JSON, CheckConstraint, Index, Uuid
)
from sqlalchemy.sql import func
from app.infrastructure.database import Base
import uuid
import enum


class CaseStatus(str, enum.Enum):
    """Lifecycle status of a surgical case"""
    PROPOSED = "proposed"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CasePriority(str, enum.Enum):
    """Priority of a surgical case"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


class PatientDetails(Base):
    """Extended patient information, keyed 1:1 by the patient's profile"""
    __tablename__ = "patient_details"

    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)

    # Semi-structured bags, e.g. date_of_birth / height_cm / smoking_status
    personal_info = Column(JSON, nullable=False, default=dict)
    physical_info = Column(JSON, nullable=False, default=dict)
    lifestyle_info = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class SurgeonDetails(Base):
    """Surgeon credentials and practice information"""
    __tablename__ = "surgeon_details"

    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    specialty = Column(String(200), nullable=False)
    hospital_affiliation = Column(String(200), nullable=False)
    years_of_experience = Column(Integer, nullable=False, default=0)
    certifications = Column(JSON)
    bio = Column(Text)
    consultation_fee = Column(Numeric(10, 2))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class VitalSigns(Base):
    """A single vital-sign measurement for a patient"""
    __tablename__ = "vital_signs"
    __table_args__ = (
        Index("idx_vital_signs_patient_id", "patient_id"),
        Index("idx_vital_signs_created_at", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    heart_rate = Column(Integer, nullable=False)
    systolic_bp = Column(Integer, nullable=False)
    diastolic_bp = Column(Integer, nullable=False)
    body_temperature_celsius = Column(Numeric(4, 2), nullable=False)
    respiratory_rate = Column(Integer, nullable=False)
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class SurgicalHistory(Base):
    """A past surgical procedure"""
    __tablename__ = "surgical_history"
    __table_args__ = (
        Index("idx_surgical_history_patient_id", "patient_id"),
        Index("idx_surgical_history_surgeon_id", "surgeon_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    # Kept after the surgeon account is removed
    surgeon_id = Column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"))

    procedure_name = Column(String(255), nullable=False)
    hospital = Column(String(255), nullable=False)
    surgery_date = Column(Date, nullable=False)
    outcome = Column(Text)
    complications = Column(Text)
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class SurgicalCase(Base):
    """A proposed or scheduled surgery"""
    __tablename__ = "surgical_cases"
    __table_args__ = (
        CheckConstraint(
            "status IN ('proposed', 'scheduled', 'in_progress', 'completed', 'cancelled')",
            name="ck_surgical_cases_status"
        ),
        CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'emergency')",
            name="ck_surgical_cases_priority"
        ),
        Index("idx_surgical_cases_patient_id", "patient_id"),
        Index("idx_surgical_cases_surgeon_id", "surgeon_id"),
        Index("idx_surgical_cases_status", "status"),
    )
    __enum_columns__ = {"status": CaseStatus, "priority": CasePriority}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    surgeon_id = Column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"))

    procedure_name = Column(String(255), nullable=False)
    scheduled_date = Column(DateTime(timezone=True))
    status = Column(String(20), nullable=False)
    priority = Column(String(20))
    estimated_duration_minutes = Column(Integer)
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
