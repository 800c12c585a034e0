from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.api.deps import get_current_caller, get_optional_caller
from app.api.v1.surgeons.schemas import (
    SurgeonDetailsCreate,
    SurgeonDetailsResponse,
    SurgeonDetailsUpdate,
)
from app.core.permissions import CallerContext
from app.domain.clinical.repository import SurgeonDetailsRepository
from app.infrastructure.database import get_db

router = APIRouter(prefix="/surgeon-details", tags=["Surgeons"])


@router.get("", response_model=List[SurgeonDetailsResponse])
async def list_surgeons(
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_optional_caller),
    specialty: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500)
):
    """Public surgeon directory; no token required"""
    repo = SurgeonDetailsRepository(db, caller)
    if specialty:
        return await repo.list_by_specialty(specialty, skip=skip, limit=limit)
    return await repo.list(skip=skip, limit=limit)


@router.post("", response_model=SurgeonDetailsResponse, status_code=status.HTTP_201_CREATED)
async def create_surgeon_details(
    surgeon_data: SurgeonDetailsCreate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    return await SurgeonDetailsRepository(db, caller).create(surgeon_data.model_dump())


@router.get("/{user_id}", response_model=SurgeonDetailsResponse)
async def get_surgeon_details(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_optional_caller)
):
    return await SurgeonDetailsRepository(db, caller).get_or_deny(user_id)


@router.put("/{user_id}", response_model=SurgeonDetailsResponse)
async def update_surgeon_details(
    user_id: uuid.UUID,
    surgeon_data: SurgeonDetailsUpdate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    values = surgeon_data.model_dump(exclude_unset=True)
    return await SurgeonDetailsRepository(db, caller).update(user_id, values)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_surgeon_details(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    await SurgeonDetailsRepository(db, caller).delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
