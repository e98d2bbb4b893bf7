"""Unit tests for CSV export."""

import csv
import io
from datetime import date, datetime, timezone

from admin_sync.application.services.csv_export import (
    attendance_month_filename,
    export_attendance_month,
    export_filename,
    export_records,
)
from admin_sync.domain.entities import FilterState, Record, get_resource_type
from tests.fakes import make_record

ROLES = get_resource_type("roles")
SUPPLIERS = get_resource_type("medicine-suppliers")


def _rows(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


def test_supplier_export_formats_dates_status_and_quotes():
    supplier = Record(
        id="4",
        status="active",
        created_at=datetime(2024, 5, 3, 9, 30, tzinfo=timezone.utc),
        fields={
            "name": "Alpha, Pharma",
            "contact_person": "Ravi",
            "email": "ravi@alpha.example",
            "phone": "98400",
        },
    )

    content = export_records([supplier], SUPPLIERS)

    lines = content.splitlines()
    assert lines[0] == "S No,Date,Company Name,Contact Person,Email,Phone,Address,Status"
    assert lines[1] == '1,03/05/2024,"Alpha, Pharma",Ravi,ravi@alpha.example,98400,,Active'


def test_role_export_counts_permissions_and_numbers_rows():
    roles = [
        make_record("1", "Admin", permissions=["patients", "billing"]),
        make_record("2", "Nurse", status="inactive", permissions=[]),
    ]

    rows = _rows(export_records(roles, ROLES))

    assert rows[0] == ["S No", "Role Name", "Description", "Permissions Count", "Status", "Created Date"]
    assert rows[1][:5] == ["1", "Admin", "", "2", "Active"]
    assert rows[2][:5] == ["2", "Nurse", "", "0", "Inactive"]


def test_filename_without_filters():
    assert export_filename(ROLES, FilterState(), date(2024, 6, 1)) == "role-management-2024-06-01.csv"


def test_filename_reflects_every_active_filter():
    filters = FilterState(
        search_term="alpha", status_filter="active", created_month=5, created_year=2024
    )
    assert (
        export_filename(SUPPLIERS, filters, date(2024, 6, 1))
        == "medicine-suppliers-2024-06-01-May-2024-active-filtered.csv"
    )


def test_monthly_attendance_grid():
    people = [make_record("STF1", "Asha", status="Active"), make_record("STF2", "Ben", status="Active")]
    entries = [
        Record(id="1", status="Present", fields={"staff_id": "STF1", "date": "2024-02-01T00:00:00.000Z"}),
        Record(id="2", status="Late", fields={"staff_id": "STF3", "date": "2024-02-02"}),
        Record(id="3", status="Absent", fields={"staff_id": "STF1", "date": "2024-03-01"}),
    ]

    rows = _rows(export_attendance_month(people, entries, 2024, 2))

    assert rows[0][:5] == ["S NO", "Staff ID", "Staff Name", "01/02", "02/02"]
    assert rows[0][-1] == "29/02"
    assert len(rows[0]) == 3 + 29
    assert rows[1][:5] == ["1", "STF1", "Asha", "Present", "-"]
    assert rows[2][:5] == ["2", "STF2", "Ben", "-", "-"]
    # Marked in the month but no longer listed
    assert rows[3][:5] == ["3", "STF3", "", "-", "Late"]
    assert len(rows) == 4


def test_attendance_month_filename():
    assert attendance_month_filename(2024, 2) == "staff-attendance-2024-02.csv"
