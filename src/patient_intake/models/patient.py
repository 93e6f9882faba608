"""Patient registration data model.

This module defines the PatientInformation, Address and PatientRecord dataclasses
used throughout the application. Attributes are snake_case; each field carries
its records-API wire name in its metadata so the JSON shape matches the remote
system's names and casing exactly.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping


def _wire(name: str) -> Any:
    """Declare a required string field with its wire name."""
    return field(metadata={"wire_name": name})


def wire_items(section: Any) -> list[tuple[str, str]]:
    """Return (wire_name, value) pairs for a section in declaration order.

    Args:
        section: PatientInformation or Address instance

    Returns:
        List of (wire_name, value) tuples
    """
    return [
        (f.metadata["wire_name"], getattr(section, f.name))
        for f in fields(section)
    ]


def _coerce(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _section_from_dict(cls: type, data: Mapping[str, Any] | None) -> Any:
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise TypeError(
            f"{cls.SECTION} must be an object, got {type(data).__name__}"
        )
    kwargs = {
        f.name: _coerce(data.get(f.metadata["wire_name"]))
        for f in fields(cls)
    }
    return cls(**kwargs)


@dataclass(frozen=True)
class PatientInformation:
    """Patient demographics collected during registration.

    Attributes:
        first_name: Patient's first name (FirstName)
        last_name: Patient's last name (LastName)
        date_of_birth: Date of birth as spoken/confirmed (DateOfBirth)
        ssn: Social security number, XXX-XX-XXXX (SSN)
        email: Contact email (EmailID)
        marital_status: Marital status (MaritalStatus)
        phone_number: Contact phone number (PhoneNumber)
    """

    SECTION = "PatientInformation"

    first_name: str = _wire("FirstName")
    last_name: str = _wire("LastName")
    date_of_birth: str = _wire("DateOfBirth")
    ssn: str = _wire("SSN")
    email: str = _wire("EmailID")
    marital_status: str = _wire("MaritalStatus")
    phone_number: str = _wire("PhoneNumber")

    def to_dict(self) -> dict[str, str]:
        return dict(wire_items(self))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "PatientInformation":
        return _section_from_dict(cls, data)


@dataclass(frozen=True)
class Address:
    """Patient address collected during registration.

    Attributes:
        type: Address type such as Home, Work or Other (Type)
        address_line1: Street address (AddressLine1)
        city: City (City)
        state: State/province (State)
        country: Country (Country)
        zip_code: Postal code (ZipCode)
    """

    SECTION = "Address"

    type: str = _wire("Type")
    address_line1: str = _wire("AddressLine1")
    city: str = _wire("City")
    state: str = _wire("State")
    country: str = _wire("Country")
    zip_code: str = _wire("ZipCode")

    def to_dict(self) -> dict[str, str]:
        return dict(wire_items(self))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Address":
        return _section_from_dict(cls, data)


@dataclass(frozen=True)
class PatientRecord:
    """Complete registration payload: demographics plus address.

    Immutable once constructed. Built transiently per registration attempt and
    never stored by the submission pipeline.

    Attributes:
        patient_information: PatientInformation section
        address: Address section

    Example:
        >>> record = PatientRecord.from_dict({
        ...     "PatientInformation": {"FirstName": "Jane", "LastName": "Doe"},
        ...     "Address": {"City": "Austin"},
        ... })
        >>> record.patient_information.first_name
        'Jane'
        >>> record.address.zip_code
        ''
    """

    patient_information: PatientInformation
    address: Address

    @property
    def sections(self) -> tuple[PatientInformation, Address]:
        """Sub-records in wire declaration order."""
        return (self.patient_information, self.address)

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Serialize to the nested records-API JSON shape.

        Returns:
            {"PatientInformation": {...}, "Address": {...}}
        """
        return {section.SECTION: section.to_dict() for section in self.sections}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PatientRecord":
        """Build a record from the nested records-API JSON shape.

        Absent keys and None values become empty strings so that they are
        reported by the validator instead of raising here.

        Args:
            data: Mapping with PatientInformation and Address objects

        Returns:
            PatientRecord instance

        Raises:
            TypeError: If data or one of its sections is not a mapping
        """
        if not isinstance(data, Mapping):
            raise TypeError(
                f"Patient record must be an object, got {type(data).__name__}"
            )
        return cls(
            patient_information=PatientInformation.from_dict(
                data.get(PatientInformation.SECTION)
            ),
            address=Address.from_dict(data.get(Address.SECTION)),
        )
