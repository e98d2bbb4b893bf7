"""Domain entity — description of one backend collection shown on an admin screen."""

import re
from dataclasses import dataclass
from typing import Any

from .record import AttendanceStatus, Record, RecordStatus

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")

_ACTIVE_STATUSES = (RecordStatus.ACTIVE.value, RecordStatus.INACTIVE.value)
_ATTENDANCE_STATUSES = tuple(s.value for s in AttendanceStatus)


@dataclass(frozen=True)
class ResourceType:
    """Static description of a resource: where it lives and how screens treat it.

    ``key`` scopes the fallback snapshot, ``endpoint`` is the path under the
    API base URL. ``natural_key`` names the fields that identify a record
    besides its id (attendance: one entry per staff member per day).
    ``csv_columns`` pairs an export header with the record attribute it reads.
    """

    key: str
    endpoint: str
    label: str
    item_label: str = "record"
    statuses: tuple[str, ...] = _ACTIVE_STATUSES
    default_status: str = RecordStatus.ACTIVE.value
    hidden_statuses: tuple[str, ...] = ()
    search_fields: tuple[str, ...] = ("name", "description")
    natural_key: tuple[str, ...] = ()
    csv_columns: tuple[tuple[str, str], ...] = ()
    export_prefix: str = ""

    @property
    def is_keyed(self) -> bool:
        return bool(self.natural_key)

    def natural_key_of(self, record: Record) -> tuple[str, ...] | None:
        """Normalised natural key of ``record``, or None when the type has none."""
        if not self.natural_key:
            return None
        return self.normalise_key(record.get(name) for name in self.natural_key)

    def natural_key_from_fields(self, fields: dict[str, Any]) -> tuple[str, ...] | None:
        if not self.natural_key:
            return None
        return self.normalise_key(fields.get(name) for name in self.natural_key)

    @staticmethod
    def normalise_key(values: Any) -> tuple[str, ...]:
        parts: list[str] = []
        for value in values:
            text = "" if value is None else str(value)
            # Backend rows carry full timestamps; entries are per calendar day.
            if _ISO_DATE.match(text):
                text = text[:10]
            parts.append(text)
        return tuple(parts)


def _categories(key: str, label: str) -> ResourceType:
    return ResourceType(
        key=key,
        endpoint=key,
        label=label,
        item_label="category",
        csv_columns=(
            ("Date", "created_at"),
            ("Category Name", "name"),
            ("Description", "description"),
            ("Status", "status"),
        ),
        export_prefix=key,
    )


def _suppliers(key: str, label: str) -> ResourceType:
    return ResourceType(
        key=key,
        endpoint=key,
        label=label,
        item_label="supplier",
        search_fields=("name", "contact_person", "email", "phone"),
        csv_columns=(
            ("Date", "created_at"),
            ("Company Name", "name"),
            ("Contact Person", "contact_person"),
            ("Email", "email"),
            ("Phone", "phone"),
            ("Address", "address"),
            ("Status", "status"),
        ),
        export_prefix=key,
    )


def _attendance(key: str, label: str, person: str) -> ResourceType:
    return ResourceType(
        key=key,
        endpoint=key,
        label=label,
        item_label="attendance entry",
        statuses=_ATTENDANCE_STATUSES,
        default_status=AttendanceStatus.PRESENT.value,
        search_fields=(f"{person}_name", f"{person}_id"),
        natural_key=(f"{person}_id", "date"),
        csv_columns=(
            ("Date", "date"),
            (f"{person.title()} ID", f"{person}_id"),
            (f"{person.title()} Name", f"{person}_name"),
            ("Check In", "check_in"),
            ("Status", "status"),
        ),
        export_prefix=key,
    )


RESOURCE_TYPES: dict[str, ResourceType] = {
    rt.key: rt
    for rt in (
        ResourceType(
            key="roles",
            endpoint="roles",
            label="Roles",
            item_label="role",
            csv_columns=(
                ("Role Name", "name"),
                ("Description", "description"),
                ("Permissions Count", "permissions"),
                ("Status", "status"),
                ("Created Date", "created_at"),
            ),
            export_prefix="role-management",
        ),
        _categories("general-categories", "General Categories"),
        _categories("medicine-categories", "Medicine Categories"),
        _categories("grocery-categories", "Grocery Categories"),
        _categories("doctor-categories", "Doctor Categories"),
        _categories("staff-categories", "Staff Categories"),
        _suppliers("medicine-suppliers", "Medicine Suppliers"),
        _suppliers("general-suppliers", "General Suppliers"),
        _suppliers("grocery-suppliers", "Grocery Suppliers"),
        ResourceType(
            key="doctors",
            endpoint="doctors",
            label="Doctors",
            item_label="doctor",
            hidden_statuses=("deleted",),
            search_fields=("name", "id", "specialization", "phone", "email"),
            csv_columns=(
                ("Doctor ID", "id"),
                ("Name", "name"),
                ("Specialization", "specialization"),
                ("Phone", "phone"),
                ("Email", "email"),
                ("Status", "status"),
                ("Join Date", "created_at"),
            ),
            export_prefix="doctors",
        ),
        ResourceType(
            key="staff",
            endpoint="staff",
            label="Staff",
            item_label="staff member",
            statuses=("Active", "Inactive"),
            default_status="Active",
            hidden_statuses=("deleted",),
            search_fields=("name", "id", "role", "email", "address"),
            csv_columns=(
                ("Staff ID", "id"),
                ("Name", "name"),
                ("Role", "role"),
                ("Phone", "phone"),
                ("Email", "email"),
                ("Status", "status"),
                ("Join Date", "created_at"),
            ),
            export_prefix="staff",
        ),
        _attendance("staff-attendance", "Staff Attendance", "staff"),
        _attendance("doctor-attendance", "Doctor Attendance", "doctor"),
    )
}


def get_resource_type(key: str) -> ResourceType:
    """Look up a built-in resource type; raises KeyError for unknown keys."""
    try:
        return RESOURCE_TYPES[key]
    except KeyError:
        raise KeyError(f"Unknown resource type '{key}'") from None
