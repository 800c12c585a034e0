from fastapi import APIRouter
from app.api.v1.auth import routes as auth
from app.api.v1.profiles import routes as profiles
from app.api.v1.patients import routes as patients
from app.api.v1.surgeons import routes as surgeons
from app.api.v1.cases import routes as cases
from app.api.v1.analytics import routes as analytics

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(profiles.router)
api_router.include_router(patients.router)
api_router.include_router(surgeons.router)
api_router.include_router(cases.router)
api_router.include_router(analytics.router)
