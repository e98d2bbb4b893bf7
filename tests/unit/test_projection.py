"""Unit tests for the filter/sort/paginate projection."""

from datetime import date, datetime, timezone

import pytest

from admin_sync.application.services import attendance_counts, project, status_counts
from admin_sync.application.services.projection import natural_sort_key
from admin_sync.domain.entities import FilterState, Record, get_resource_type
from admin_sync.domain.exceptions import ValidationFailure
from tests.fakes import make_record

ROLES = get_resource_type("roles")
STAFF = get_resource_type("staff")
SUPPLIERS = get_resource_type("medicine-suppliers")


def _roles(n: int) -> list[Record]:
    return [make_record(str(i), f"Role {i}") for i in range(1, n + 1)]


# ── Pagination ──


def test_exactly_one_full_page():
    result = project(_roles(10), FilterState(page_size=10), ROLES)
    assert len(result.rows) == 10
    assert result.total_pages == 1
    assert result.page == 1


def test_eleventh_record_starts_second_page():
    result = project(_roles(11), FilterState(page=2, page_size=10), ROLES)
    assert [r.id for r in result.rows] == ["11"]
    assert result.total_pages == 2
    assert result.total_matching == 11


def test_page_past_end_is_clamped_to_last_page():
    result = project(_roles(11), FilterState(page=7, page_size=10), ROLES)
    assert result.page == 2
    assert [r.id for r in result.rows] == ["11"]


def test_empty_collection_is_page_one_of_zero():
    result = project([], FilterState(page=3), ROLES)
    assert result.rows == ()
    assert result.total_pages == 0
    assert result.page == 1
    assert result.has_next is False


def test_invalid_filter_state_is_rejected():
    with pytest.raises(ValidationFailure):
        FilterState(page=0)
    with pytest.raises(ValidationFailure):
        FilterState(created_month=13, created_year=2024)


# ── Filtering ──


def test_search_is_case_insensitive_and_ignores_missing_fields():
    records = [
        make_record("1", "Alpha Pharma", contact_person="Ravi"),
        make_record("2", "Beta Labs"),
        make_record("3", "Gamma", email="sales@alpha.example"),
    ]
    result = project(records, FilterState(search_term="ALPHA"), SUPPLIERS)
    assert [r.id for r in result.rows] == ["1", "3"]


def test_search_matches_identifier():
    records = [make_record("STF7", "Asha", status="Active"), make_record("STF8", "Ben", status="Active")]
    result = project(records, FilterState(search_term="stf8"), STAFF)
    assert [r.id for r in result.rows] == ["STF8"]


def test_role_search_ignores_numeric_identifier():
    records = [
        make_record("1", "Admin", description="Full access"),
        make_record("2", "Nurse", description="Ward duties"),
    ]
    result = project(records, FilterState(search_term="1"), ROLES)
    assert result.total_matching == 0
    assert result.rows == ()


def test_status_filter_and_hidden_statuses():
    records = [
        make_record("STF1", status="Active"),
        make_record("STF2", status="Inactive"),
        make_record("STF3", status="deleted"),
    ]
    assert [r.id for r in project(records, FilterState(), STAFF).rows] == ["STF1", "STF2"]
    inactive = project(records, FilterState(status_filter="Inactive"), STAFF)
    assert [r.id for r in inactive.rows] == ["STF2"]


def test_created_period_filter_needs_a_date():
    may = Record(id="1", status="active", created_at=datetime(2024, 5, 3, tzinfo=timezone.utc))
    june = Record(id="2", status="active", created_at=datetime(2024, 6, 1, tzinfo=timezone.utc))
    undated = Record(id="3", status="active")

    result = project([may, june, undated], FilterState(created_month=5, created_year=2024), ROLES)
    assert [r.id for r in result.rows] == ["1"]

    month_only = project([may, june, undated], FilterState(created_month=5), ROLES)
    assert month_only.total_matching == 3


# ── Sorting ──


def test_identifiers_sort_naturally():
    records = [make_record(i, status="Active") for i in ("STF10", "STF2", "STF1")]
    assert [r.id for r in project(records, FilterState(), STAFF).rows] == ["STF1", "STF2", "STF10"]

    numeric = [make_record(i) for i in ("10", "9", "100")]
    assert [r.id for r in project(numeric, FilterState(), ROLES).rows] == ["9", "10", "100"]


def test_natural_sort_key_handles_mixed_identifiers():
    assert sorted(["b2", "10", "a"], key=natural_sort_key) == ["a", "b2", "10"]


# ── Summaries ──


def test_status_counts_skip_hidden_records():
    records = [
        make_record("STF1", status="Active"),
        make_record("STF2", status="Active"),
        make_record("STF3", status="Inactive"),
        make_record("STF4", status="deleted"),
    ]
    assert status_counts(records, STAFF) == {"Active": 2, "Inactive": 1, "total": 3}


def test_attendance_counts_for_one_day():
    entries = [
        Record(id="1", status="Present", fields={"staff_id": "STF1", "date": "2024-05-01T00:00:00.000Z"}),
        Record(id="2", status="Late", fields={"staff_id": "STF2", "date": "2024-05-01"}),
        Record(id="3", status="Absent", fields={"staff_id": "STF1", "date": "2024-05-02"}),
    ]
    assert attendance_counts(entries, date(2024, 5, 1)) == {
        "Present": 1,
        "Absent": 0,
        "Late": 1,
        "Half Day": 0,
    }
