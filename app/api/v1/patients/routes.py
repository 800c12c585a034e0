from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.api.deps import get_current_caller
from app.api.v1.patients.schemas import (
    PatientDetailsCreate,
    PatientDetailsResponse,
    PatientDetailsUpdate,
    VitalSignsCreate,
    VitalSignsResponse,
    VitalSignsUpdate,
    SurgicalHistoryCreate,
    SurgicalHistoryResponse,
    SurgicalHistoryUpdate,
)
from app.core.permissions import CallerContext
from app.domain.clinical.repository import (
    PatientDetailsRepository,
    SurgicalHistoryRepository,
    VitalSignsRepository,
)
from app.infrastructure.database import get_db

router = APIRouter(tags=["Patients"])


# Patient details endpoints
@router.get("/patient-details", response_model=List[PatientDetailsResponse])
async def list_patient_details(
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500)
):
    return await PatientDetailsRepository(db, caller).list(skip=skip, limit=limit)


@router.post("/patient-details", response_model=PatientDetailsResponse, status_code=status.HTTP_201_CREATED)
async def create_patient_details(
    details_data: PatientDetailsCreate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    """Create the details record for a patient"""
    # JSON mode so dates inside the info bags are stored as ISO strings
    values = details_data.model_dump(mode="json", exclude_none=True)
    return await PatientDetailsRepository(db, caller).create(values)


@router.get("/patient-details/{user_id}", response_model=PatientDetailsResponse)
async def get_patient_details(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    return await PatientDetailsRepository(db, caller).get_or_deny(user_id)


@router.put("/patient-details/{user_id}", response_model=PatientDetailsResponse)
async def update_patient_details(
    user_id: uuid.UUID,
    details_data: PatientDetailsUpdate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    values = details_data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    return await PatientDetailsRepository(db, caller).update(user_id, values)


@router.delete("/patient-details/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_patient_details(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    await PatientDetailsRepository(db, caller).delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Vital signs endpoints
@router.get("/vital-signs", response_model=List[VitalSignsResponse])
async def list_vital_signs(
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
    patient_id: Optional[uuid.UUID] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500)
):
    """List visible measurements, newest first"""
    repo = VitalSignsRepository(db, caller)
    return await repo.list_for_patient(patient_id, skip=skip, limit=limit)


@router.post("/vital-signs", response_model=VitalSignsResponse, status_code=status.HTTP_201_CREATED)
async def create_vital_signs(
    vitals_data: VitalSignsCreate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    return await VitalSignsRepository(db, caller).create(vitals_data.model_dump())


@router.get("/vital-signs/{vital_signs_id}", response_model=VitalSignsResponse)
async def get_vital_signs(
    vital_signs_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    return await VitalSignsRepository(db, caller).get_or_deny(vital_signs_id)


@router.put("/vital-signs/{vital_signs_id}", response_model=VitalSignsResponse)
async def update_vital_signs(
    vital_signs_id: uuid.UUID,
    vitals_data: VitalSignsUpdate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    values = vitals_data.model_dump(exclude_unset=True)
    return await VitalSignsRepository(db, caller).update(vital_signs_id, values)


@router.delete("/vital-signs/{vital_signs_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vital_signs(
    vital_signs_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    await VitalSignsRepository(db, caller).delete(vital_signs_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Surgical history endpoints
@router.get("/surgical-history", response_model=List[SurgicalHistoryResponse])
async def list_surgical_history(
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
    patient_id: Optional[uuid.UUID] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500)
):
    repo = SurgicalHistoryRepository(db, caller)
    return await repo.list_for_patient(patient_id, skip=skip, limit=limit)


@router.post("/surgical-history", response_model=SurgicalHistoryResponse, status_code=status.HTTP_201_CREATED)
async def create_surgical_history(
    history_data: SurgicalHistoryCreate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    """Record a past procedure (healthcare providers only)"""
    return await SurgicalHistoryRepository(db, caller).create(history_data.model_dump())


@router.get("/surgical-history/{history_id}", response_model=SurgicalHistoryResponse)
async def get_surgical_history(
    history_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    return await SurgicalHistoryRepository(db, caller).get_or_deny(history_id)


@router.put("/surgical-history/{history_id}", response_model=SurgicalHistoryResponse)
async def update_surgical_history(
    history_id: uuid.UUID,
    history_data: SurgicalHistoryUpdate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    values = history_data.model_dump(exclude_unset=True)
    return await SurgicalHistoryRepository(db, caller).update(history_id, values)


@router.delete("/surgical-history/{history_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_surgical_history(
    history_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    await SurgicalHistoryRepository(db, caller).delete(history_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
