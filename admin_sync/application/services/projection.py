"""View projection — filter, sort and paginate a collection for display.

Pure functions: nothing here touches the cache or the network.
"""

import math
import re
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from admin_sync.domain.entities import ALL_STATUSES, FilterState, Record, ResourceType

_DIGITS = re.compile(r"(\d+)")


@dataclass(frozen=True)
class ProjectionResult:
    """One page of a filtered collection.

    ``page`` is the effective page after clamping; ``matching`` is the whole
    filtered, sorted list (CSV export uses it).
    """

    rows: tuple[Record, ...]
    total_matching: int
    total_pages: int
    page: int
    matching: tuple[Record, ...]

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def natural_sort_key(value: str) -> tuple[Any, ...]:
    """Split digits from text so ``STF2`` sorts before ``STF10``."""
    parts = _DIGITS.split(value.lower())
    # Alternate (0, text) / (1, number) pairs keep mixed ids comparable.
    return tuple((1, int(part)) if part.isdigit() else (0, part) for part in parts if part)


def _matches_search(record: Record, term: str, search_fields: Sequence[str]) -> bool:
    needle = term.strip().lower()
    if not needle:
        return True
    for name in search_fields:
        value = record.get(name)
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False


def _matches_status(record: Record, status_filter: str) -> bool:
    if status_filter == ALL_STATUSES:
        return True
    return record.status.lower() == status_filter.lower()


def _matches_period(record: Record, month: int | None, year: int | None) -> bool:
    if month is None or year is None:
        return True
    if record.created_at is None:
        return False
    return record.created_at.month == month and record.created_at.year == year


def project(
    records: Iterable[Record],
    filter_state: FilterState,
    resource_type: ResourceType,
) -> ProjectionResult:
    """Filter, sort and slice ``records`` according to ``filter_state``.

    A page past the end is clamped to the last page; an empty result is
    page 1 of 0. Never raises for out-of-range pages.
    """
    hidden = {s.lower() for s in resource_type.hidden_statuses}
    matching = [
        r
        for r in records
        if r.status.lower() not in hidden
        and _matches_search(r, filter_state.search_term, resource_type.search_fields)
        and _matches_status(r, filter_state.status_filter)
        and _matches_period(r, filter_state.created_month, filter_state.created_year)
    ]
    matching.sort(key=lambda r: natural_sort_key(r.id))

    total = len(matching)
    size = filter_state.page_size
    total_pages = math.ceil(total / size) if total else 0
    page = min(filter_state.page, total_pages) if total_pages else 1

    start = (page - 1) * size
    return ProjectionResult(
        rows=tuple(matching[start:start + size]),
        total_matching=total,
        total_pages=total_pages,
        page=page,
        matching=tuple(matching),
    )


def status_counts(records: Iterable[Record], resource_type: ResourceType) -> dict[str, int]:
    """Count visible records per status, plus a ``total`` entry (summary cards)."""
    hidden = {s.lower() for s in resource_type.hidden_statuses}
    visible = [r for r in records if r.status.lower() not in hidden]
    counts = Counter(r.status for r in visible)
    summary = {status: counts.get(status, 0) for status in resource_type.statuses}
    for status, count in counts.items():
        summary.setdefault(status, count)
    summary["total"] = len(visible)
    return summary


def entry_date(record: Record) -> str:
    """Calendar day of an attendance entry as ``YYYY-MM-DD`` ('' when missing)."""
    value = record.get("date")
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value or "")[:10]


def attendance_counts(entries: Iterable[Record], on_date: date) -> dict[str, int]:
    """Present/Absent/Late/Half Day counts for one day."""
    day = on_date.isoformat()
    counts = Counter(e.status for e in entries if entry_date(e) == day)
    return {
        "Present": counts.get("Present", 0),
        "Absent": counts.get("Absent", 0),
        "Late": counts.get("Late", 0),
        "Half Day": counts.get("Half Day", 0),
    }
