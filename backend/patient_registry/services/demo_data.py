"""Optional demo data seeding (development only)."""

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from patient_registry.core.logging import get_logger
from patient_registry.models.patient import Patient
from patient_registry.schemas.patient import PatientCreate
from patient_registry.services.patient_service import PatientService

logger = get_logger(__name__)


DEMO_PATIENTS = [
    {
        "firstName": "John",
        "lastName": "Doe",
        "dateOfBirth": "1965-03-15",
        "address": {
            "addressLine1": "42 Elm Street",
            "city": "Springfield",
            "state": "IL",
            "zipCode": "62704",
        },
        "status": "active",
    },
    {
        "firstName": "Jane",
        "lastName": "Smith",
        "middleName": "A.",
        "dateOfBirth": "1978-07-22",
        "address": {
            "addressLine1": "9 Harbor Road",
            "addressLine2": "Apt 3",
            "city": "Portland",
            "state": "ME",
            "zipCode": "04101",
        },
        "secondaryAddress": {
            "addressLine1": "100 Commerce Way",
            "city": "Portland",
            "state": "ME",
            "zipCode": "04102",
            "addressType": "work",
        },
        "status": "onboarding",
    },
    {
        "firstName": "Robert",
        "lastName": "Johnson",
        "dateOfBirth": "1955-11-08",
        "address": {
            "addressLine1": "7 Lake View Drive",
            "city": "Madison",
            "state": "WI",
            "zipCode": "53703",
        },
    },
]


def _demo_key(first_name: str, last_name: str) -> tuple[str, str]:
    return first_name, last_name


DEMO_PATIENT_NAMES = {_demo_key(p["firstName"], p["lastName"]) for p in DEMO_PATIENTS}


async def _find_demo_patients(db: AsyncSession) -> list[Patient]:
    result = await db.execute(
        select(Patient).where(
            or_(
                *(
                    and_(Patient.first_name == first, Patient.last_name == last)
                    for first, last in sorted(DEMO_PATIENT_NAMES)
                )
            )
        )
    )
    return list(result.scalars().all())


async def seed_demo_patients(db: AsyncSession) -> int:
    """Insert demo patients if they do not already exist."""
    existing = {_demo_key(p.first_name, p.last_name) for p in await _find_demo_patients(db)}
    service = PatientService(db)

    inserted = 0
    for demo in DEMO_PATIENTS:
        if _demo_key(demo["firstName"], demo["lastName"]) in existing:
            continue
        await service.create(PatientCreate.model_validate(demo))
        inserted += 1

    if inserted:
        logger.warning("Demo patients seeded", count=inserted)
    return inserted


async def purge_demo_patients(db: AsyncSession, dry_run: bool = True) -> int:
    """Delete demo patients and, through the cascade, their addresses.

    Returns the number of matched patients; nothing is deleted on a dry run.
    """
    patients = await _find_demo_patients(db)
    if dry_run:
        return len(patients)

    for patient in patients:
        await db.delete(patient)
    await db.commit()

    logger.warning("Demo patients purged", count=len(patients))
    return len(patients)
