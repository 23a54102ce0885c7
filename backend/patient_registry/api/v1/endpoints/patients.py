"""Patient management endpoints for Patient Registry."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from patient_registry.models.base import get_db
from patient_registry.schemas.patient import PatientCreate, PatientRead, PatientUpdate
from patient_registry.services.patient_service import PatientService

router = APIRouter()


def get_patient_service(db: Annotated[AsyncSession, Depends(get_db)]) -> PatientService:
    """Build a service bound to the request session."""
    return PatientService(db)


@router.get("", response_model=list[PatientRead])
async def list_patients(
    service: Annotated[PatientService, Depends(get_patient_service)],
) -> list[PatientRead]:
    """List all patients in creation order."""
    patients = await service.list_all()
    return [PatientRead.model_validate(patient) for patient in patients]


@router.get("/{patient_id}", response_model=PatientRead)
async def get_patient(
    patient_id: str,
    service: Annotated[PatientService, Depends(get_patient_service)],
) -> PatientRead:
    """Get a patient by id."""
    patient = await service.get(patient_id)
    return PatientRead.model_validate(patient)


@router.post("", response_model=PatientRead, status_code=status.HTTP_201_CREATED)
async def create_patient(
    payload: PatientCreate,
    service: Annotated[PatientService, Depends(get_patient_service)],
) -> PatientRead:
    """Register a new patient with a primary and optional secondary address."""
    patient = await service.create(payload)
    return PatientRead.model_validate(patient)


@router.patch("/{patient_id}", response_model=PatientRead)
async def update_patient(
    patient_id: str,
    payload: PatientUpdate,
    service: Annotated[PatientService, Depends(get_patient_service)],
) -> PatientRead:
    """Apply a partial update; only fields present in the body change."""
    patient = await service.update(patient_id, payload)
    return PatientRead.model_validate(patient)
