"""
Database models for Patient Registry.

This module exports all SQLAlchemy models and database utilities.
"""

from patient_registry.models.base import (
    Base,
    create_db_engine,
    create_engine_from_settings,
    create_session_maker,
    get_db,
    init_models,
    metadata,
)
from patient_registry.models.patient import Patient, PatientStatus
from patient_registry.models.address import AddressType, PatientAddress, DEFAULT_COUNTRY

__all__ = [
    "Base",
    "metadata",
    "get_db",
    "init_models",
    "create_db_engine",
    "create_engine_from_settings",
    "create_session_maker",
    "Patient",
    "PatientStatus",
    "PatientAddress",
    "AddressType",
    "DEFAULT_COUNTRY",
]
