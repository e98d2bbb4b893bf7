"""Pydantic schemas for create/edit forms — checked before any remote call."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from admin_sync.domain.entities import ResourceType
from admin_sync.domain.exceptions import ValidationFailure


class _Form(BaseModel):
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    status: str | None = None


class NamedForm(_Form):
    """Categories and any resource that only needs a name."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""


class RoleForm(NamedForm):
    permissions: list[str] = Field(default_factory=list)


class SupplierForm(_Form):
    name: str = Field(..., min_length=1, max_length=255)
    contact_person: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        if value and "@" not in value:
            raise ValueError("email must contain '@'")
        return value


class PersonForm(_Form):
    """Doctors and staff."""

    name: str = Field(..., min_length=1, max_length=255)
    phone: str = ""
    email: str = ""


class AttendanceForm(_Form):
    """One attendance mark; the person id field depends on the screen."""

    date: date
    check_in: str = ""
    check_out: str = ""
    notes: str = ""


FORM_SCHEMAS: dict[str, type[_Form]] = {
    "roles": RoleForm,
    "medicine-suppliers": SupplierForm,
    "general-suppliers": SupplierForm,
    "grocery-suppliers": SupplierForm,
    "doctors": PersonForm,
    "staff": PersonForm,
    "staff-attendance": AttendanceForm,
    "doctor-attendance": AttendanceForm,
}


def validate_form(resource_type: ResourceType, fields: dict[str, Any]) -> dict[str, Any]:
    """Validate user input for ``resource_type`` and return the cleaned payload.

    Raises:
        ValidationFailure: listing every problem found.
    """
    schema = FORM_SCHEMAS.get(resource_type.key, NamedForm)
    try:
        form = schema.model_validate(fields)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or 'form'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ValidationFailure(f"Invalid {resource_type.label} form", errors) from exc

    errors: list[str] = []
    if form.status is not None and form.status not in resource_type.statuses:
        errors.append(
            f"status: must be one of {', '.join(resource_type.statuses)}, got '{form.status}'"
        )
    for key_field in resource_type.natural_key:
        if key_field != "date" and not str(fields.get(key_field) or "").strip():
            errors.append(f"{key_field}: field required")
    if errors:
        raise ValidationFailure(f"Invalid {resource_type.label} form", errors)

    cleaned = form.model_dump(mode="json")
    if cleaned.get("status") is None:
        cleaned.pop("status", None)
    return cleaned
