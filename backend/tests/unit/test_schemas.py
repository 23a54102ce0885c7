"""Tests for request and response schemas."""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from patient_registry.models import AddressType, PatientStatus
from patient_registry.schemas.patient import AddressInput, PatientCreate, PatientUpdate


def _error_fields(exc: ValidationError) -> set[str]:
    return {".".join(str(part) for part in error["loc"]) for error in exc.errors()}


class TestAddressInput:
    """Test the address sub-schema."""

    def test_defaults(self, primary_address):
        """Test country and type defaults."""
        address = AddressInput.model_validate(primary_address)
        assert address.country == "USA"
        assert address.address_type == AddressType.HOME
        assert address.address_line2 is None

    def test_blank_line2_is_dropped(self, primary_address):
        """Test an empty second line is stored as missing."""
        address = AddressInput.model_validate(dict(primary_address, addressLine2="  "))
        assert address.address_line2 is None

    def test_required_fields(self):
        """Test every missing required field is reported."""
        with pytest.raises(ValidationError) as exc_info:
            AddressInput.model_validate({"addressLine1": " "})
        assert _error_fields(exc_info.value) == {"addressLine1", "city", "state", "zipCode"}

    def test_unknown_address_type(self, primary_address):
        """Test address types outside the enumeration fail."""
        with pytest.raises(ValidationError) as exc_info:
            AddressInput.model_validate(dict(primary_address, addressType="vacation"))
        assert _error_fields(exc_info.value) == {"addressType"}

    def test_format_line_skips_empty_parts(self, primary_address):
        """Test the single-line rendering."""
        address = AddressInput.model_validate(primary_address)
        assert address.format_line() == "1 Main St, Springfield, IL, 62704, USA"

    def test_empty_country_is_kept_and_skipped_in_line(self, primary_address):
        """Test an explicitly empty country is accepted and left out of the line."""
        address = AddressInput.model_validate(dict(primary_address, country=""))
        assert address.country == ""
        assert address.format_line() == "1 Main St, Springfield, IL, 62704"

    def test_format_line_with_all_parts(self, secondary_address):
        """Test the single-line rendering keeps component order."""
        address = AddressInput.model_validate(dict(secondary_address, country="Canada"))
        assert address.format_line() == "200 Office Park, Suite 12, Chicago, IL, 60601, Canada"


class TestPatientCreate:
    """Test the creation schema."""

    def test_defaults(self, patient_payload):
        """Test status default and optional fields."""
        patient = PatientCreate.model_validate(patient_payload)
        assert patient.status == PatientStatus.INQUIRY
        assert patient.middle_name is None
        assert patient.secondary_address is None

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1990-01-01", datetime(1990, 1, 1, tzinfo=timezone.utc)),
            ("1990-01-01T00:00:00Z", datetime(1990, 1, 1, tzinfo=timezone.utc)),
            ("1990-01-01T02:00:00+02:00", datetime(1990, 1, 1, tzinfo=timezone.utc)),
            (date(1990, 1, 1), datetime(1990, 1, 1, tzinfo=timezone.utc)),
            (
                datetime(1990, 1, 1, 5, 0, tzinfo=timezone(timedelta(hours=5))),
                datetime(1990, 1, 1, tzinfo=timezone.utc),
            ),
        ],
    )
    def test_date_of_birth_normalized(self, patient_payload, value, expected):
        """Test accepted date forms normalize to a UTC instant."""
        patient = PatientCreate.model_validate(dict(patient_payload, dateOfBirth=value))
        assert patient.date_of_birth == expected
        assert patient.date_of_birth.tzinfo is not None

    @pytest.mark.parametrize("value", ["not-a-date", "1990-02-30", "", 19900101, None])
    def test_date_of_birth_invalid(self, patient_payload, value):
        """Test unparseable dates fail."""
        with pytest.raises(ValidationError) as exc_info:
            PatientCreate.model_validate(dict(patient_payload, dateOfBirth=value))
        assert _error_fields(exc_info.value) == {"dateOfBirth"}

    def test_unknown_status(self, patient_payload):
        """Test statuses outside the enumeration fail."""
        with pytest.raises(ValidationError) as exc_info:
            PatientCreate.model_validate(dict(patient_payload, status="deceased"))
        assert _error_fields(exc_info.value) == {"status"}

    def test_secondary_address_validated(self, patient_payload):
        """Test the secondary address uses the address sub-schema."""
        with pytest.raises(ValidationError) as exc_info:
            PatientCreate.model_validate(
                dict(patient_payload, secondaryAddress={"addressLine1": "2 Side St"})
            )
        assert _error_fields(exc_info.value) == {
            "secondaryAddress.city",
            "secondaryAddress.state",
            "secondaryAddress.zipCode",
        }

    def test_missing_address(self, patient_payload):
        """Test the primary address is required."""
        payload = dict(patient_payload)
        del payload["address"]
        with pytest.raises(ValidationError) as exc_info:
            PatientCreate.model_validate(payload)
        assert _error_fields(exc_info.value) == {"address"}


class TestPatientUpdate:
    """Test the partial update schema."""

    def test_absent_fields_are_not_changes(self):
        """Test an empty payload changes nothing."""
        assert PatientUpdate.model_validate({}).changes() == {}

    def test_only_provided_fields(self):
        """Test only keys present in the payload are reported."""
        update = PatientUpdate.model_validate({"status": "churned", "lastName": "Roe"})
        assert update.changes() == {"status": PatientStatus.CHURNED, "last_name": "Roe"}

    def test_explicit_null_clears_middle_name(self):
        """Test null middle name is a change, not an absence."""
        update = PatientUpdate.model_validate({"middleName": None})
        assert update.changes() == {"middle_name": None}

    @pytest.mark.parametrize("field", ["firstName", "lastName", "dateOfBirth", "address", "status"])
    def test_null_rejected_for_required_columns(self, field):
        """Test null is refused for non-nullable columns."""
        with pytest.raises(ValidationError) as exc_info:
            PatientUpdate.model_validate({field: None})
        assert _error_fields(exc_info.value) == {field}

    def test_empty_name_rejected(self):
        """Test names stay non-empty on update."""
        with pytest.raises(ValidationError):
            PatientUpdate.model_validate({"firstName": ""})

    def test_address_text(self):
        """Test free text address is applied as given."""
        update = PatientUpdate.model_validate({"address": "PO Box 12, Springfield"})
        assert update.changes() == {"address": "PO Box 12, Springfield"}

    def test_structured_address_is_formatted(self, primary_address):
        """Test a structured address becomes the single-line rendering."""
        update = PatientUpdate.model_validate({"address": primary_address})
        assert update.changes() == {"address": "1 Main St, Springfield, IL, 62704, USA"}

    def test_date_of_birth_normalized(self):
        """Test date strings normalize on update too."""
        update = PatientUpdate.model_validate({"dateOfBirth": "2001-05-06"})
        assert update.changes() == {
            "date_of_birth": datetime(2001, 5, 6, tzinfo=timezone.utc)
        }
