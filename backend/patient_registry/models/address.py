"""
Patient address database model.

Structured postal addresses owned by a patient. Rows are removed
together with their patient.
"""

from enum import Enum as PyEnum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Enum, ForeignKey, Index, String, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from patient_registry.models.base import Base

if TYPE_CHECKING:
    from patient_registry.models.patient import Patient


class AddressType(str, PyEnum):
    """Address usage type."""

    HOME = "home"
    WORK = "work"
    BILLING = "billing"
    OTHER = "other"


DEFAULT_COUNTRY = "USA"


class PatientAddress(Base):
    """PatientAddress model representing one postal address of a patient."""

    __tablename__ = "patient_addresses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )

    address_line1: Mapped[str] = mapped_column(String(256), nullable=False)
    address_line2: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    city: Mapped[str] = mapped_column(String(128), nullable=False)
    state: Mapped[str] = mapped_column(String(64), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(32), nullable=False)
    country: Mapped[str] = mapped_column(
        String(64), default=DEFAULT_COUNTRY, server_default=DEFAULT_COUNTRY, nullable=False
    )

    address_type: Mapped[AddressType] = mapped_column(
        Enum(
            AddressType,
            name="address_type",
            native_enum=False,
            create_constraint=True,
            length=16,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=AddressType.HOME,
        server_default=AddressType.HOME.value,
        nullable=False,
    )

    is_primary: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )

    patient: Mapped["Patient"] = relationship("Patient", back_populates="addresses")

    __table_args__ = (
        Index("ix_patient_addresses_patient_id", "patient_id"),
        Index("ix_patient_addresses_patient_primary", "patient_id", "is_primary"),
    )

    def __repr__(self) -> str:
        return (
            f"<PatientAddress(id={self.id}, patient_id={self.patient_id}, "
            f"type='{self.address_type.value if self.address_type else None}', "
            f"primary={self.is_primary})>"
        )
