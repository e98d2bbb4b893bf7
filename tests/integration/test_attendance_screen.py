"""End-to-end tests: AttendanceScreen marks, resets and monthly export."""

from datetime import date

import pytest
import pytest_asyncio

from admin_sync.domain.entities import MutationState, Record
from admin_sync.domain.exceptions import ValidationFailure
from admin_sync.infrastructure.dependencies import build_screen
from admin_sync.infrastructure.storage.json_fallback_store import InMemoryFallbackStore
from tests.integration.backend import InMemoryBackend

MAY_1 = date(2024, 5, 1)


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend(
        "staff-attendance",
        [
            {
                "id": 1,
                "staff_id": "STF1",
                "staff_name": "Asha",
                "date": "2024-05-01T00:00:00.000Z",
                "status": "Present",
                "check_in": "09:00",
            },
        ],
        key_fields=("staff_id", "date"),
    )


@pytest_asyncio.fixture
async def screen(backend):
    screen = build_screen(
        "staff-attendance", http_client=backend.client(), store=InMemoryFallbackStore()
    )
    await screen.activate()
    yield screen
    await screen.deactivate()


@pytest.mark.asyncio
async def test_marking_same_day_twice_keeps_one_entry(screen, backend):
    first = screen.mark_attendance("STF2", "Ben", MAY_1, "Present")
    await first.wait()
    second = screen.mark_attendance("STF2", "Ben", MAY_1, "Late", check_in="09:40")
    await second.wait()

    entries = [r for r in screen.view.records if r.get("staff_id") == "STF2"]
    assert len(entries) == 1
    assert entries[0].status == "Late"
    assert entries[0].get("check_in") == "09:40"
    assert len(backend.rows) == 2


@pytest.mark.asyncio
async def test_remark_of_server_entry_with_timestamp_date_updates_it(screen, backend):
    pending = screen.mark_attendance("STF1", "Asha", MAY_1, "Half Day")
    assert [r.id for r in screen.view.records] == ["1"]

    assert await pending.wait() is MutationState.CONFIRMED
    assert screen.entry_for("STF1", MAY_1).status == "Half Day"
    assert len(backend.rows) == 1


@pytest.mark.asyncio
async def test_absent_mark_has_no_check_in(screen):
    pending = screen.mark_attendance("STF3", "Chitra", MAY_1, "Absent")
    await pending.wait()

    assert screen.entry_for("STF3", MAY_1).get("check_in") == ""


@pytest.mark.asyncio
async def test_unknown_status_is_rejected(screen):
    with pytest.raises(ValidationFailure):
        screen.mark_attendance("STF2", "Ben", MAY_1, "Holiday")


@pytest.mark.asyncio
async def test_reset_removes_the_day_entry(screen, backend):
    assert screen.reset_attendance("STF2", MAY_1) is None

    pending = screen.reset_attendance("STF1", MAY_1)
    assert screen.entry_for("STF1", MAY_1) is None
    await pending.wait()

    assert backend.rows == {}
    assert screen.entry_for("STF1", MAY_1) is None


@pytest.mark.asyncio
async def test_day_counts_and_monthly_export(screen):
    await screen.mark_attendance("STF2", "Ben", MAY_1, "Late").wait()

    assert screen.day_counts(MAY_1) == {"Present": 1, "Absent": 0, "Late": 1, "Half Day": 0}

    people = [
        Record(id="STF10", status="Active", fields={"name": "Dev"}),
        Record(id="STF2", status="Active", fields={"name": "Ben"}),
        Record(id="STF1", status="Active", fields={"name": "Asha"}),
    ]
    export = screen.export_month(people, 2024, 5)

    assert export.filename == "staff-attendance-2024-05.csv"
    assert export.row_count == 3
    lines = export.content.splitlines()
    assert lines[1].startswith("1,STF1,Asha,Present,-")
    assert lines[2].startswith("2,STF2,Ben,Late,-")
    assert lines[3].startswith("3,STF10,Dev,-,-")
