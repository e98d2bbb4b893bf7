from .record_screen import RecordScreen
from .attendance_screen import AttendanceScreen

__all__ = [
    "RecordScreen",
    "AttendanceScreen",
]
