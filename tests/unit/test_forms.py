"""Unit tests for form validation."""

import pytest

from admin_sync.application.schemas import validate_form
from admin_sync.domain.entities import get_resource_type
from admin_sync.domain.exceptions import ValidationFailure


def test_valid_role_form_is_cleaned():
    cleaned = validate_form(
        get_resource_type("roles"),
        {"name": "  Pharmacist ", "permissions": ["inventory"], "status": "active"},
    )

    assert cleaned["name"] == "Pharmacist"
    assert cleaned["permissions"] == ["inventory"]
    assert cleaned["status"] == "active"


def test_missing_status_is_left_to_the_backend():
    cleaned = validate_form(get_resource_type("general-categories"), {"name": "Linen"})
    assert "status" not in cleaned
    assert cleaned["description"] == ""


def test_blank_name_is_rejected():
    with pytest.raises(ValidationFailure) as exc_info:
        validate_form(get_resource_type("general-categories"), {"name": "   "})
    assert any(err.startswith("name") for err in exc_info.value.errors)


def test_unknown_status_is_rejected():
    with pytest.raises(ValidationFailure, match="status"):
        validate_form(get_resource_type("staff"), {"name": "Asha", "status": "active"})


def test_supplier_email_must_look_like_an_address():
    with pytest.raises(ValidationFailure, match="email"):
        validate_form(get_resource_type("medicine-suppliers"), {"name": "Alpha", "email": "alpha"})


def test_attendance_needs_person_and_date():
    attendance = get_resource_type("staff-attendance")

    cleaned = validate_form(
        attendance, {"staff_id": "STF1", "date": "2024-05-01", "status": "Half Day"}
    )
    assert cleaned["date"] == "2024-05-01"

    with pytest.raises(ValidationFailure) as exc_info:
        validate_form(attendance, {"date": "2024-05-01", "status": "Present"})
    assert "staff_id: field required" in exc_info.value.errors

    with pytest.raises(ValidationFailure):
        validate_form(attendance, {"staff_id": "STF1", "date": "first of May"})
