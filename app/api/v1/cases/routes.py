from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.api.deps import get_current_caller
from app.api.v1.cases.schemas import (
    SurgicalCaseCreate,
    SurgicalCaseResponse,
    SurgicalCaseUpdate,
)
from app.core.permissions import CallerContext
from app.domain.clinical.models import CaseStatus
from app.domain.clinical.repository import SurgicalCaseRepository
from app.infrastructure.database import get_db

router = APIRouter(prefix="/surgical-cases", tags=["Surgical Cases"])


@router.get("", response_model=List[SurgicalCaseResponse])
async def list_surgical_cases(
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
    patient_id: Optional[uuid.UUID] = None,
    surgeon_id: Optional[uuid.UUID] = None,
    status: Optional[CaseStatus] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500)
):
    """List visible cases with optional filters"""
    repo = SurgicalCaseRepository(db, caller)
    return await repo.search(
        patient_id=patient_id,
        surgeon_id=surgeon_id,
        status=status,
        skip=skip,
        limit=limit
    )


@router.post("", response_model=SurgicalCaseResponse, status_code=status.HTTP_201_CREATED)
async def create_surgical_case(
    case_data: SurgicalCaseCreate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    """Open a case; the caller must be its surgeon or an admin"""
    return await SurgicalCaseRepository(db, caller).create(case_data.model_dump())


@router.get("/{case_id}", response_model=SurgicalCaseResponse)
async def get_surgical_case(
    case_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    return await SurgicalCaseRepository(db, caller).get_or_deny(case_id)


@router.put("/{case_id}", response_model=SurgicalCaseResponse)
async def update_surgical_case(
    case_id: uuid.UUID,
    case_data: SurgicalCaseUpdate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    values = case_data.model_dump(exclude_unset=True)
    repo = SurgicalCaseRepository(db, caller)
    if set(values) == {"status"} and values["status"] is not None:
        return await repo.update_status(case_id, values["status"])
    return await repo.update(case_id, values)


@router.delete("/{case_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_surgical_case(
    case_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    await SurgicalCaseRepository(db, caller).delete(case_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
