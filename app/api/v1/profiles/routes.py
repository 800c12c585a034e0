from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.api.deps import get_authenticated_caller, get_current_caller
from app.api.v1.profiles.schemas import (
    ProfileAdminUpdate,
    ProfileCreate,
    ProfileResponse,
)
from app.core.exceptions import ConstraintViolationError, RowAccessDeniedError
from app.core.permissions import CallerContext, Role
from app.domain.profiles.repository import ProfileRepository
from app.infrastructure.database import get_db

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("", response_model=List[ProfileResponse], status_code=status.HTTP_200_OK)
async def list_profiles(
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    role: Optional[Role] = None
):
    """List the profiles visible to the caller"""
    repo = ProfileRepository(db, caller)
    if role is not None:
        return await repo.list_by_role(role, skip=skip, limit=limit)
    return await repo.list(skip=skip, limit=limit)


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    profile_data: ProfileCreate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_authenticated_caller)
):
    """Insert a profile; normally done by signup provisioning.

    Callers without a profile may insert their own; admins may insert any.
    """
    if profile_data.role == Role.ADMIN and not caller.has_role(Role.ADMIN):
        raise ConstraintViolationError(field="role", message="Only admins can grant the admin role")

    return await ProfileRepository(db, caller).create(profile_data.model_dump())


@router.get("/me", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
async def get_my_profile(
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    """Get the caller's own profile"""
    profile = await ProfileRepository(db, caller).get_own()
    if profile is None:
        raise RowAccessDeniedError()
    return profile


@router.get("/{profile_id}", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
async def get_profile(
    profile_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    return await ProfileRepository(db, caller).get_or_deny(profile_id)


@router.put("/{profile_id}", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
async def update_profile(
    profile_id: uuid.UUID,
    profile_data: ProfileAdminUpdate,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    """Update a profile; only admins may change the role"""
    values = profile_data.model_dump(exclude_unset=True)
    if "role" in values and not caller.has_role(Role.ADMIN):
        raise ConstraintViolationError(field="role", message="Only admins can change roles")

    return await ProfileRepository(db, caller).update(profile_id, values)


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    profile_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: CallerContext = Depends(get_current_caller)
):
    """Delete a profile and everything that cascades from it"""
    await ProfileRepository(db, caller).delete(profile_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
