"""API v1 Router - Aggregates all API endpoints."""

from fastapi import APIRouter

from patient_registry.api.v1.endpoints import patients

api_router = APIRouter()

# Patient management
api_router.include_router(
    patients.router,
    prefix="/patients",
    tags=["Patients"],
)
