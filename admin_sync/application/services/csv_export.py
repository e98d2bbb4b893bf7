"""CSV export of filtered collections and monthly attendance grids."""

import calendar
import csv
import io
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from admin_sync.application.services.projection import entry_date, natural_sort_key
from admin_sync.domain.entities import ALL_STATUSES, FilterState, Record, ResourceType

_DATE_COLUMNS = {"created_at", "date"}


@dataclass(frozen=True)
class CsvExport:
    filename: str
    content: str
    row_count: int


def _format_date(value: Any) -> str:
    """Render a date as DD/MM/YYYY; unparseable text is passed through."""
    if value is None or value == "":
        return ""
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    text = str(value)
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).strftime("%d/%m/%Y")
    except ValueError:
        return text


def _format_cell(attribute: str, value: Any) -> Any:
    if attribute in _DATE_COLUMNS:
        return _format_date(value)
    if attribute == "status" and isinstance(value, str) and value:
        return value[0].upper() + value[1:]
    if isinstance(value, (list, tuple, set)):
        # Roles export how many permissions they grant.
        return len(value)
    return "" if value is None else value


def _write(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def export_records(rows: Sequence[Record], resource_type: ResourceType) -> str:
    """Serialise ``rows`` (the whole filtered set, not one page) with a serial-number column."""
    header = ["S No", *(title for title, _ in resource_type.csv_columns)]
    body = (
        [index, *(_format_cell(attr, record.get(attr)) for _, attr in resource_type.csv_columns)]
        for index, record in enumerate(rows, start=1)
    )
    return _write(header, body)


def export_filename(resource_type: ResourceType, filter_state: FilterState, today: date) -> str:
    """``<prefix>-YYYY-MM-DD[-<Month>-<Year>][-<status>][-filtered].csv``"""
    name = f"{resource_type.export_prefix or resource_type.key}-{today.isoformat()}"
    if filter_state.has_period:
        name += f"-{calendar.month_name[filter_state.created_month]}-{filter_state.created_year}"
    if filter_state.status_filter != ALL_STATUSES:
        name += f"-{filter_state.status_filter}"
    if filter_state.search_term.strip():
        name += "-filtered"
    return f"{name}.csv"


def export_attendance_month(
    people: Sequence[Record],
    entries: Iterable[Record],
    year: int,
    month: int,
    *,
    person_field: str = "staff",
) -> str:
    """Monthly grid: one row per person, one ``dd/MM`` column per day, ``-`` when unmarked.

    People who have entries in the month but are no longer listed still get
    a row (with an empty name).
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12, got {month}")
    id_field = f"{person_field}_id"
    days = [date(year, month, d) for d in range(1, calendar.monthrange(year, month)[1] + 1)]
    prefix = f"{year:04d}-{month:02d}-"

    by_key: dict[tuple[str, str], str] = {}
    marked_ids: list[str] = []
    for entry in entries:
        day = entry_date(entry)
        if not day.startswith(prefix):
            continue
        person_id = str(entry.get(id_field) or "")
        by_key.setdefault((person_id, day), entry.status)
        marked_ids.append(person_id)

    names = {p.id: str(p.get("name") or "") for p in people}
    person_ids = list(dict.fromkeys([*(p.id for p in people), *marked_ids]))
    title = person_field.title()

    header = ["S NO", f"{title} ID", f"{title} Name", *(d.strftime("%d/%m") for d in days)]
    rows = (
        [
            index,
            person_id,
            names.get(person_id, ""),
            *(by_key.get((person_id, d.isoformat()), "-") for d in days),
        ]
        for index, person_id in enumerate(person_ids, start=1)
    )
    return _write(header, rows)


def attendance_month_filename(year: int, month: int, *, prefix: str = "staff-attendance") -> str:
    return f"{prefix}-{year:04d}-{month:02d}.csv"


def sorted_people(people: Iterable[Record]) -> list[Record]:
    """People in identifier order (``STF2`` before ``STF10``)."""
    return sorted(people, key=lambda p: natural_sort_key(p.id))
