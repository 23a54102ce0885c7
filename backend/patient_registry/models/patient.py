"""
Patient database model.

Represents a patient record with demographics, lifecycle status
and a relationship to the patient's addresses.
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from patient_registry.models.base import Base

if TYPE_CHECKING:
    from patient_registry.models.address import PatientAddress


class PatientStatus(str, PyEnum):
    """Patient lifecycle status. Any status may follow any other."""

    INQUIRY = "inquiry"
    ONBOARDING = "onboarding"
    ACTIVE = "active"
    CHURNED = "churned"


class Patient(Base):
    """
    Patient model representing a registered patient.

    The ``address`` column keeps a single-line rendering of the primary
    address; the structured rows live in ``patient_addresses``.
    """

    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    middle_name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    # Stored as a UTC instant, date-valued by convention
    date_of_birth: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    address: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[PatientStatus] = mapped_column(
        Enum(
            PatientStatus,
            name="patient_status",
            native_enum=False,
            create_constraint=True,
            length=16,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=PatientStatus.INQUIRY,
        server_default=PatientStatus.INQUIRY.value,
        nullable=False,
    )

    # Relationships
    addresses: Mapped[list["PatientAddress"]] = relationship(
        "PatientAddress",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="PatientAddress.id",
    )

    __table_args__ = (
        Index("ix_patients_created_at", "created_at"),
        Index("ix_patients_status", "status"),
        Index("ix_patients_last_name", "last_name"),
    )

    @property
    def primary_address(self) -> Optional["PatientAddress"]:
        """Return the primary address row, if loaded."""
        return next((addr for addr in self.addresses if addr.is_primary), None)

    def __repr__(self) -> str:
        return f"<Patient(id={self.id}, status='{self.status.value if self.status else None}')>"
