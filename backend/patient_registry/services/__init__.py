"""Business services for Patient Registry."""

from patient_registry.services.patient_service import PatientService, parse_patient_id

__all__ = ["PatientService", "parse_patient_id"]
