"""Patient lifecycle service.

Creates patients together with their addresses in one transaction,
reads them back by id or in creation order, and applies partial updates.
"""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from patient_registry.core.exceptions import NotFoundError, PersistenceError, ValidationError
from patient_registry.core.logging import get_logger
from patient_registry.models.address import PatientAddress
from patient_registry.models.patient import Patient
from patient_registry.schemas.patient import AddressInput, PatientCreate, PatientUpdate
from patient_registry.utils.datetime_utils import utc_now

logger = get_logger(__name__)

# Largest value a signed 64-bit INTEGER column can hold
MAX_PATIENT_ID = 2**63 - 1


def parse_patient_id(raw_id: int | str) -> int:
    """Parse a path identifier into a positive integer.

    Raises:
        ValidationError: if the identifier is not a positive base-10 integer
            that fits the id column
    """
    if isinstance(raw_id, bool):
        raise ValidationError("Invalid patient ID")
    if isinstance(raw_id, int):
        patient_id = raw_id
    else:
        text = str(raw_id).strip()
        if not text.isascii() or not text.isdigit() or len(text) > len(str(MAX_PATIENT_ID)):
            raise ValidationError("Invalid patient ID", patient_id=raw_id)
        patient_id = int(text)

    if not 0 < patient_id <= MAX_PATIENT_ID:
        raise ValidationError("Invalid patient ID", patient_id=raw_id)
    return patient_id


def build_address(address: AddressInput, is_primary: bool) -> PatientAddress:
    """Create an address row from validated input."""
    return PatientAddress(
        address_line1=address.address_line1,
        address_line2=address.address_line2,
        city=address.city,
        state=address.state,
        zip_code=address.zip_code,
        country=address.country,
        address_type=address.address_type,
        is_primary=is_primary,
    )


class PatientService:
    """Patient record operations over an injected session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payload: PatientCreate) -> Patient:
        """Register a patient with its primary and optional secondary address.

        The patient row and all address rows are committed together; any
        failure rolls the whole unit back.
        """
        now = utc_now()
        patient = Patient(
            first_name=payload.first_name,
            last_name=payload.last_name,
            middle_name=payload.middle_name,
            date_of_birth=payload.date_of_birth,
            address=payload.address.format_line(),
            status=payload.status,
            created_at=now,
            updated_at=now,
        )

        addresses = [build_address(payload.address, is_primary=True)]
        if payload.secondary_address is not None:
            addresses.append(build_address(payload.secondary_address, is_primary=False))
        for address in addresses:
            address.created_at = now
            address.updated_at = now

        # The unit of work inserts the patient row before its addresses
        patient.addresses = addresses

        try:
            self.session.add(patient)
            await self.session.flush()
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "patient_create_failed",
                error_type=type(e).__name__,
                address_count=len(addresses),
            )
            raise PersistenceError("Failed to create patient") from e

        logger.info(
            "patient_created",
            patient_id=patient.id,
            status=patient.status.value,
            address_count=len(addresses),
        )
        return patient

    async def get(self, patient_id: int | str) -> Patient:
        """Fetch one patient.

        Raises:
            ValidationError: malformed id
            NotFoundError: no patient with that id
        """
        pk = parse_patient_id(patient_id)
        patient = await self._load(pk)
        if patient is None:
            raise NotFoundError("Patient not found", patient_id=pk)
        return patient

    async def list_all(self) -> Sequence[Patient]:
        """Return every patient in creation order."""
        result = await self.session.execute(
            select(Patient).order_by(Patient.created_at.asc(), Patient.id.asc())
        )
        return result.scalars().all()

    async def update(self, patient_id: int | str, payload: PatientUpdate) -> Patient:
        """Apply the provided fields to an existing patient.

        Address rows are left untouched. ``updated_at`` is refreshed even
        when the payload is empty.
        """
        pk = parse_patient_id(patient_id)
        patient = await self._load(pk)
        if patient is None:
            raise NotFoundError("Patient not found", patient_id=pk)

        changes = payload.changes()
        for field, value in changes.items():
            setattr(patient, field, value)
        patient.updated_at = utc_now()

        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "patient_update_failed",
                patient_id=pk,
                error_type=type(e).__name__,
            )
            raise PersistenceError("Failed to update patient") from e

        logger.info(
            "patient_updated",
            patient_id=pk,
            fields=sorted(changes),
        )
        return patient

    async def _load(self, patient_id: int) -> Patient | None:
        result = await self.session.execute(select(Patient).where(Patient.id == patient_id))
        return result.scalar_one_or_none()
