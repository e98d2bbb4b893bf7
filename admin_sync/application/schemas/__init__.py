from .record import RecordPayload
from .forms import (
    FORM_SCHEMAS,
    AttendanceForm,
    NamedForm,
    PersonForm,
    RoleForm,
    SupplierForm,
    validate_form,
)

__all__ = [
    "RecordPayload",
    "FORM_SCHEMAS",
    "AttendanceForm",
    "NamedForm",
    "PersonForm",
    "RoleForm",
    "SupplierForm",
    "validate_form",
]
