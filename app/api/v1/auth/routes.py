from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.auth.schemas import LoginRequest, SignupRequest, SignupResponse, TokenResponse
from app.domain.identity.service import IdentityService
from app.domain.profiles.repository import ProfileRepository, load_caller_context
from app.infrastructure.database import get_db

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: SignupRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create an identity; its profile is provisioned in the same transaction"""
    identity_service = IdentityService(db)
    identity = await identity_service.register(
        email=signup_data.email,
        password=signup_data.password,
        metadata=signup_data.metadata
    )

    caller = await load_caller_context(db, identity.id)
    profile = await ProfileRepository(db, caller).get_own()

    return SignupResponse(
        id=identity.id,
        email=identity.email,
        full_name=profile.full_name if profile else None,
        role=caller.role,
        created_at=identity.created_at
    )


@router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Authenticate and return an access token"""
    identity_service = IdentityService(db)
    return await identity_service.authenticate(login_data.email, login_data.password)
