"""
Roster Kernel: Selector Tests

Run:  pytest roster_kernel/test_selectors.py
"""

from __future__ import annotations

import pytest

from roster_kernel import selectors
from roster_kernel.diagnostics import compute_diagnostics, find_dangling_references
from roster_kernel.domain_types import (
    AppState, Area, Location, Roster, RosterStats, Shift, StaffRecord,
)


def _shift(sid, area_id="bar", section="Front Bar", start="10:00", end="16:00", staff_id="alex"):
    return Shift(id=sid, role="Bartender", area_id=area_id, section=section,
                 start=start, end=end, staff_id=staff_id)


def _state() -> AppState:
    lion = Location(id="lion", name="Golden Lion", address="1 Main St", areas=[
        Area(id="bar", name="Bar", sections=["Front Bar", "Beer Garden"]),
        Area(id="kitchen", name="Kitchen", sections=["Pass", "Prep"]),
    ])
    cup = Location(id="cup", name="Corner Cup", address="2 High St", areas=[
        Area(id="counter", name="Counter", sections=["Till"]),
    ])
    staff = [
        StaffRecord(id="alex", name="Alex", role="Bartender", pay_rate=30, locations=["lion"]),
        StaffRecord(id="sam", name="Sam", role="Chef", pay_rate=40, locations=["lion", "cup"]),
        StaffRecord(id="pat", name="Pat", role="Barista", locations=["cup"]),
    ]
    rosters = [
        Roster(id="r1", date_iso="2026-03-14", location_id="lion", shifts=[
            _shift("s1"),
            _shift("s2", section="Beer Garden", start="12:00", end="18:00"),
            _shift("s3", area_id="kitchen", section="Pass", staff_id="sam"),
        ]),
        Roster(id="r2", date_iso="2026-03-02", location_id="lion", shifts=[_shift("s4")]),
        Roster(id="r3", date_iso="2026-03-14", location_id="cup", shifts=[
            _shift("s5", area_id="counter", section="Till", staff_id="pat"),
        ]),
        Roster(id="r4", date_iso="2026-04-01", location_id="lion", shifts=[]),
    ]
    return AppState(locations=[lion, cup], staff=staff, rosters=rosters, active_location_id="lion")


@pytest.fixture(autouse=True)
def _clear_caches():
    for fn in (
        selectors.active_location, selectors.staff_by_location,
        selectors.rosters_by_date, selectors.rosters_in_month,
        selectors.area_usage_counts, selectors.section_usage_counts,
        selectors.roster_stats,
    ):
        fn.cache_clear()
    yield


# -- lookups --------------------------------------------------------------

def test_lookups_tolerate_missing_ids():
    state = _state()
    assert selectors.find_location(state, "lion").name == "Golden Lion"
    assert selectors.find_location(state, "gone") is None
    assert selectors.find_location(state, None) is None
    assert selectors.find_area(None, "bar") is None
    assert selectors.find_area(state.locations[0], "counter") is None
    assert selectors.find_staff(state.staff, "gone") is None
    assert selectors.find_roster(state, "r2").date_iso == "2026-03-02"


def test_active_location():
    state = _state()
    assert selectors.active_location(state).id == "lion"

    dangling = AppState(locations=state.locations, active_location_id="deleted")
    assert selectors.active_location(dangling) is None


def test_staff_by_location():
    state = _state()
    assert [s.id for s in selectors.staff_by_location(state, "lion")] == ["alex", "sam"]
    assert [s.id for s in selectors.staff_by_location(state, "cup")] == ["sam", "pat"]
    assert selectors.staff_by_location(state, None) == []
    assert selectors.staff_by_location(state, "") == []


def test_rosters_by_date_with_and_without_location():
    state = _state()
    assert [r.id for r in selectors.rosters_by_date(state, "2026-03-14")] == ["r1", "r3"]
    assert [r.id for r in selectors.rosters_by_date(state, "2026-03-14", "cup")] == ["r3"]
    assert selectors.rosters_by_date(state, "2026-03-15") == []


def test_rosters_in_month_grouped_by_day():
    state = _state()
    march = selectors.rosters_in_month(state, 2026, 3)
    assert list(march) == ["2026-03-02", "2026-03-14"]
    assert [r.id for r in march["2026-03-14"]] == ["r1", "r3"]

    lion_only = selectors.rosters_in_month(state, 2026, 3, "lion")
    assert [r.id for day in lion_only.values() for r in day] == ["r2", "r1"]
    assert selectors.rosters_in_month(state, 2026, 5) == {}


# -- memoization ----------------------------------------------------------

def test_selectors_return_identical_result_for_same_state():
    state = _state()
    first = selectors.staff_by_location(state, "lion")
    assert selectors.staff_by_location(state, "lion") is first

    other = selectors.staff_by_location(state, "cup")
    assert other is not first

    copied = state.copy()
    again = selectors.staff_by_location(copied, "lion")
    assert again is not first
    assert again == first


def test_roster_stats_memoized_on_roster_and_staff():
    state = _state()
    roster = state.rosters[0]
    stats = selectors.roster_stats(roster, state.staff)
    assert selectors.roster_stats(roster, state.staff) is stats


# -- usage counts ---------------------------------------------------------

def test_usage_counts():
    state = _state()
    areas = selectors.area_usage_counts(state, "lion")
    sections = selectors.section_usage_counts(state, "lion")

    assert areas == {"bar": 3, "kitchen": 1}
    assert sections == {"bar": {"Front Bar": 2, "Beer Garden": 1}, "kitchen": {"Pass": 1}}
    assert selectors.area_usage(areas, "bar") == 3
    assert selectors.area_usage(areas, "unused") == 0
    assert selectors.area_usage(areas, None) == 0
    assert selectors.section_usage(sections, "bar", "Front Bar") == 2
    assert selectors.section_usage(sections, "kitchen", "Prep") == 0
    assert selectors.section_usage(sections, None, "Pass") == 0


def test_usage_counts_scoped_to_location():
    state = _state()
    assert selectors.area_usage_counts(state, "cup") == {"counter": 1}
    assert selectors.area_usage_counts(state, "nowhere") == {}


# -- stats ----------------------------------------------------------------

def test_parse_minutes():
    assert selectors.parse_minutes("00:00") == 0
    assert selectors.parse_minutes("23:59") == 23 * 60 + 59
    assert selectors.parse_minutes("24:00") is None
    assert selectors.parse_minutes("9:00") is None
    assert selectors.parse_minutes("") is None
    assert selectors.parse_minutes(None) is None


def test_two_shifts_total_seven_hours():
    roster = Roster(id="r", date_iso="2026-03-14", location_id="lion", shifts=[
        _shift("a", start="09:00", end="12:00", staff_id=None),
        _shift("b", start="13:00", end="17:00", staff_id=None),
    ])
    stats = selectors.roster_stats(roster, [])
    assert stats == RosterStats(total_hours=7.0, total_cost=0.0, total_shifts=2)


def test_cost_uses_pay_rate_and_skips_missing_staff():
    state = _state()
    roster = Roster(id="r", date_iso="2026-03-14", location_id="lion", shifts=[
        _shift("a", start="10:00", end="16:00", staff_id="alex"),   # 6h @ 30
        _shift("b", start="10:00", end="11:30", staff_id="sam"),    # 1.5h @ 40
        _shift("c", start="10:00", end="12:00", staff_id="pat"),    # no rate
        _shift("d", start="10:00", end="12:00", staff_id="ghost"),  # dangling
    ])
    stats = selectors.roster_stats(roster, state.staff)
    assert stats.total_hours == 11.5
    assert stats.total_cost == 240.0
    assert stats.total_shifts == 4


def test_inverted_or_malformed_shift_contributes_zero_hours():
    roster = Roster(id="r", date_iso="2026-03-14", location_id="lion", shifts=[
        _shift("a", start="14:00", end="10:00"),
        _shift("b", start="bad", end="10:00"),
    ])
    stats = selectors.roster_stats(roster, _state().staff)
    assert stats.total_hours == 0.0
    assert stats.total_cost == 0.0
    assert stats.total_shifts == 2


def test_stats_rounded_after_summing():
    roster = Roster(id="r", date_iso="2026-03-14", location_id="lion", shifts=[
        _shift("a", start="10:00", end="10:20", staff_id=None),
        _shift("b", start="11:00", end="11:20", staff_id=None),
        _shift("c", start="12:00", end="12:20", staff_id=None),
    ])
    assert selectors.roster_stats(roster, []).total_hours == 1.0


def test_empty_roster_stats():
    roster = Roster(id="r", date_iso="2026-03-14", location_id="lion")
    assert selectors.roster_stats(roster, []).to_dict() == {
        "total_hours": 0.0, "total_cost": 0.0, "total_shifts": 0,
    }


# -- timeline -------------------------------------------------------------

def test_shifts_by_section_rows_and_ordering():
    state = _state()
    roster = Roster(id="r", date_iso="2026-03-14", location_id="lion", shifts=[
        _shift("late", start="18:00", end="23:00"),
        _shift("early", start="09:00", end="15:00"),
        _shift("gone", area_id="bar", section="Cellar"),
        _shift("orphan", area_id="deleted-area", section="Front Bar"),
    ])
    rows = selectors.shifts_by_section(roster, state.locations[0])

    assert [(r.area_name, r.section) for r in rows] == [
        ("Bar", "Front Bar"), ("Bar", "Beer Garden"),
        ("Kitchen", "Pass"), ("Kitchen", "Prep"),
    ]
    assert [s.id for s in rows[0].shifts] == ["early", "late"]
    assert all(not r.shifts for r in rows[1:])


# -- diagnostics ----------------------------------------------------------

def test_dangling_references_are_reported_not_fatal():
    state = _state()
    state.staff = [s for s in state.staff if s.id != "alex"]
    state.locations[0].areas = [a for a in state.locations[0].areas if a.id != "kitchen"]

    dangling = find_dangling_references(state)
    assert ("r1", "s1", "alex") in dangling["shift_staff"]
    assert ("r1", "s3", "kitchen") in dangling["shift_areas"]
    assert dangling["roster_locations"] == []

    diag = compute_diagnostics(state)
    assert diag["location_count"] == 2
    assert diag["shift_count"] == 5
    assert diag["unassigned_shift_count"] == 0
    assert any("removed staff" in w for w in diag["warnings"])
    assert any("missing areas" in w for w in diag["warnings"])


def test_diagnostics_flags_duplicate_rosters_and_missing_active_location():
    state = _state()
    state.rosters.append(Roster(id="r5", date_iso="2026-03-14", location_id="lion"))
    state.active_location_id = "deleted"

    warnings = compute_diagnostics(state)["warnings"]
    assert any("Multiple rosters" in w and "2026-03-14" in w for w in warnings)
    assert any("no longer exists" in w for w in warnings)
