"""Attendance screen — daily marks keyed by (person, date)."""

import csv
import io
from collections.abc import Sequence
from datetime import date, datetime

from admin_sync.application.services import CsvExport, PendingMutation, attendance_counts
from admin_sync.application.services.csv_export import (
    attendance_month_filename,
    export_attendance_month,
    sorted_people,
)
from admin_sync.domain.entities import AttendanceStatus, Record
from admin_sync.presentation.screens.record_screen import RecordScreen


class AttendanceScreen(RecordScreen):
    """Record screen for attendance resources.

    There is at most one entry per person per day: marking a day that is
    already marked updates that entry instead of adding a second one.
    """

    @property
    def person_field(self) -> str:
        """``staff`` or ``doctor``, taken from the resource's natural key."""
        return self.resource_type.natural_key[0].removesuffix("_id")

    def mark_attendance(
        self,
        person_id: str,
        person_name: str,
        on_date: date,
        status: str,
        check_in: str | None = None,
    ) -> PendingMutation:
        if check_in is None:
            check_in = "" if status == AttendanceStatus.ABSENT.value else datetime.now().strftime("%H:%M")
        fields = {
            f"{self.person_field}_id": person_id,
            f"{self.person_field}_name": person_name,
            "date": on_date.isoformat(),
            "status": status,
            "check_in": check_in,
        }
        return self.create(fields)

    def reset_attendance(self, person_id: str, on_date: date) -> PendingMutation | None:
        """Remove the day's mark; None when the person was not marked that day."""
        entry = self.entry_for(person_id, on_date)
        if entry is None:
            return None
        return self.delete(entry.id)

    def entry_for(self, person_id: str, on_date: date) -> Record | None:
        key = self.resource_type.normalise_key((person_id, on_date.isoformat()))
        return self._cache.find_by_natural_key(key)

    def day_counts(self, on_date: date) -> dict[str, int]:
        return attendance_counts(self.view.records, on_date)

    def export_month(self, people: Sequence[Record], year: int, month: int) -> CsvExport:
        """Monthly grid of every person's marks for ``year``-``month``."""
        ordered = sorted_people(people)
        content = export_attendance_month(
            ordered, self.view.records, year, month, person_field=self.person_field
        )
        return CsvExport(
            filename=attendance_month_filename(
                year, month, prefix=self.resource_type.export_prefix
            ),
            content=content,
            row_count=sum(1 for _ in csv.reader(io.StringIO(content))) - 1,
        )
