from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.api.deps import get_current_caller
from app.api.v1.analytics.schemas import (
    HistoricalDataCreate,
    HistoricalDataResponse,
    HistoricalDataUpdate,
)
from app.core.permissions import CallerContext
from app.domain.analytics.repository import HistoricalSurgicalDataRepository
from app.infrastructure.database import get_db

router = APIRouter(prefix="/historical-surgical-data", tags=["Analytics"])


@router.get("", response_model=List[HistoricalDataResponse])
async def list_historical_data(
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
    hospital_id: Optional[str] = None,
    year: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000)
):
    """Weekly volume series, ordered by week"""
    repo = HistoricalSurgicalDataRepository(db, caller)
    return await repo.search(hospital_id=hospital_id, year=year, skip=skip, limit=limit)


@router.post("", response_model=HistoricalDataResponse, status_code=status.HTTP_201_CREATED)
async def create_historical_data(
    data: HistoricalDataCreate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    return await HistoricalSurgicalDataRepository(db, caller).create(data.model_dump())


@router.get("/{record_id}", response_model=HistoricalDataResponse)
async def get_historical_data(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    return await HistoricalSurgicalDataRepository(db, caller).get_or_deny(record_id)


@router.put("/{record_id}", response_model=HistoricalDataResponse)
async def update_historical_data(
    record_id: uuid.UUID,
    data: HistoricalDataUpdate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    values = data.model_dump(exclude_unset=True)
    return await HistoricalSurgicalDataRepository(db, caller).update(record_id, values)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_historical_data(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    await HistoricalSurgicalDataRepository(db, caller).delete(record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
