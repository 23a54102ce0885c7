"""Pydantic schemas for the registry API."""

from patient_registry.schemas.patient import (
    AddressInput,
    PatientAddressRead,
    PatientCreate,
    PatientRead,
    PatientUpdate,
)

__all__ = [
    "AddressInput",
    "PatientCreate",
    "PatientUpdate",
    "PatientRead",
    "PatientAddressRead",
]
