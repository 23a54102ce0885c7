"""Request and response schemas for patients and their addresses.

JSON payloads use camelCase keys; Python attributes stay snake_case.
"""

from datetime import date, datetime
from typing import Annotated, Any, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel

from patient_registry.models.address import DEFAULT_COUNTRY, AddressType
from patient_registry.models.patient import PatientStatus
from patient_registry.utils.datetime_utils import as_utc, to_utc_instant


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    """Treat empty optional strings as missing."""
    if value is None:
        return None
    return value or None


RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
StrippedText = Annotated[str, StringConstraints(strip_whitespace=True)]
OptionalText = Annotated[Optional[StrippedText], AfterValidator(_blank_to_none)]


def _parse_date_of_birth(value: Any) -> datetime:
    if value is None:
        raise ValueError("Date of birth is required")
    if not isinstance(value, (str, date)):
        raise ValueError("Date of birth must be a date or an ISO 8601 string")
    try:
        return to_utc_instant(value)
    except ValueError:
        raise ValueError(f"Invalid date of birth: {value!r}") from None


class CamelModel(BaseModel):
    """Base schema mapping snake_case attributes to camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddressInput(CamelModel):
    """Structured address supplied by a client."""

    address_line1: RequiredText
    address_line2: OptionalText = None
    city: RequiredText
    state: RequiredText
    zip_code: RequiredText
    country: StrippedText = DEFAULT_COUNTRY
    address_type: AddressType = AddressType.HOME

    def format_line(self) -> str:
        """Render the address as a single line, skipping empty parts."""
        parts = [
            self.address_line1,
            self.address_line2,
            self.city,
            self.state,
            self.zip_code,
            self.country,
        ]
        return ", ".join(part for part in parts if part)


class PatientCreate(CamelModel):
    """Payload for registering a new patient."""

    first_name: RequiredText
    last_name: RequiredText
    middle_name: OptionalText = None
    date_of_birth: datetime
    address: AddressInput
    secondary_address: Optional[AddressInput] = None
    status: PatientStatus = PatientStatus.INQUIRY

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def validate_date_of_birth(cls, value: Any) -> datetime:
        return _parse_date_of_birth(value)


class PatientUpdate(CamelModel):
    """Partial update payload.

    Only keys present in the request are applied. ``middleName: null``
    clears the middle name; ``null`` is rejected for every other field.
    """

    first_name: Optional[RequiredText] = None
    last_name: Optional[RequiredText] = None
    middle_name: OptionalText = None
    date_of_birth: Optional[datetime] = None
    address: Optional[AddressInput | RequiredText] = None
    status: Optional[PatientStatus] = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def validate_date_of_birth(cls, value: Any) -> datetime:
        return _parse_date_of_birth(value)

    @field_validator("first_name", "last_name", "address", "status")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # Only runs for keys present in the payload
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Return a mapping of every provided column to its new value."""
        provided: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if isinstance(value, AddressInput):
                value = value.format_line()
            provided[name] = value
        return provided


class PatientAddressRead(CamelModel):
    """Stored patient address."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    zip_code: str
    country: str
    address_type: AddressType
    is_primary: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value: datetime) -> datetime:
        return as_utc(value)


class PatientRead(CamelModel):
    """Stored patient record."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    date_of_birth: datetime
    address: str
    status: PatientStatus
    created_at: datetime
    updated_at: datetime
    addresses: list[PatientAddressRead] = Field(default_factory=list)

    @field_validator("date_of_birth", "created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value: datetime) -> datetime:
        return as_utc(value)
