"""
Roster Kernel: Validation Rule Tests

  - name uniqueness is case-insensitive and trim-insensitive
  - shift times need start < end in "HH:mm"
  - areas and sections in use cannot be removed (or renamed)
  - a location edit is rejected as a whole
  - rosters need at least one shift unless the policy allows empty ones

Run:  pytest roster_kernel/test_validation.py
"""

from __future__ import annotations

import pytest

from roster_kernel.constants import (
    MSG_BAD_TIME, MSG_DUPLICATE_AREA, MSG_DUPLICATE_SECTION,
    MSG_END_BEFORE_START, MSG_REQUIRED,
)
from roster_kernel.domain_types import (
    AppState, Area, Location, NewAreaInput, NewLocationInput, Roster,
    RosterPolicy, Shift, StaffRecord,
)
from roster_kernel.validation import (
    RemovalBlockedError,
    ValidationError,
    ValidationIssue,
    area_name_errors,
    area_removal_error,
    can_remove_area,
    can_remove_section,
    check_location_edit,
    check_location_removal,
    check_new_locations,
    check_roster,
    check_shift,
    check_staff,
    date_error,
    ensure_valid,
    section_name_errors,
    section_rename_error,
    shift_time_error,
)


def _state() -> AppState:
    loc = Location(id="L1", name="Golden Lion", address="1 Main St", areas=[
        Area(id="A1", name="Bar", sections=["Front Bar", "Beer Garden"]),
        Area(id="A2", name="Kitchen", sections=["Pass"]),
    ])
    roster = Roster(id="R1", date_iso="2026-03-14", location_id="L1", shifts=[
        Shift(id="S1", role="Bartender", area_id="A1", section="Front Bar",
              start="10:00", end="16:00", staff_id="alex"),
    ])
    return AppState(locations=[loc], rosters=[roster], active_location_id="L1")


def _rules(issues):
    return [i.rule for i in issues]


# -- single-value rules ----------------------------------------------------

@pytest.mark.parametrize("start,end,expected", [
    ("14:00", "10:00", MSG_END_BEFORE_START),
    ("10:00", "10:00", MSG_END_BEFORE_START),
    ("10:00", "14:00", None),
    ("00:00", "23:59", None),
    ("", "10:00", MSG_REQUIRED),
    ("10:00", None, MSG_REQUIRED),
    ("9:00", "10:00", MSG_BAD_TIME),
    ("10:00", "24:00", MSG_BAD_TIME),
])
def test_shift_time_error(start, end, expected):
    assert shift_time_error(start, end) == expected


def test_area_names_duplicate_ignoring_case_and_whitespace():
    errors = area_name_errors(["Bar", "bar ", "Kitchen"])
    assert errors == [MSG_DUPLICATE_AREA, MSG_DUPLICATE_AREA, None]


def test_area_names_empty_is_required():
    assert area_name_errors(["  ", "Bar"]) == [MSG_REQUIRED, None]


def test_section_names_duplicate_within_area():
    assert section_name_errors(["Main", " MAIN", "Function Room"]) == [
        MSG_DUPLICATE_SECTION, MSG_DUPLICATE_SECTION, None,
    ]


def test_date_error():
    assert date_error("2026-03-14") is None
    assert date_error("2026-02-30") is not None
    assert date_error("14/03/2026") is not None
    assert date_error("") == MSG_REQUIRED


def test_removal_and_rename_messages():
    assert area_removal_error(0) is None
    assert area_removal_error(2) == "Cannot remove; used by 2 shift(s)."
    assert section_rename_error(0) is None
    assert section_rename_error(1) == "In use by 1 shift(s); rename blocked."


def test_can_remove_area_and_section():
    state = _state()
    assert not can_remove_area(state, "L1", "A1")
    assert can_remove_area(state, "L1", "A2")
    assert not can_remove_section(state, "L1", "A1", "Front Bar")
    assert can_remove_section(state, "L1", "A1", "Beer Garden")


# -- locations --------------------------------------------------------------

def test_new_locations_report_indexed_fields():
    issues = check_new_locations([
        NewLocationInput(name="Golden Lion", address="1 Main St", areas=[
            NewAreaInput("Bar", ["Front Bar"]), NewAreaInput("bar ", []),
        ]),
        NewLocationInput(name="", address="2 High St"),
    ])
    fields = {i.field for i in issues}
    assert "locations[0].areas[0].name" in fields
    assert "locations[0].areas[1].name" in fields
    assert "locations[1].name" in fields


def test_location_edit_removing_used_area_is_blocked():
    state = _state()
    kept = [Area(id="A2", name="Kitchen", sections=["Pass"])]
    issues = check_location_edit(state, "L1", "Golden Lion", "1 Main St", kept)
    assert _rules(issues) == ["area_in_use"]
    assert issues[0].message == "Cannot remove; used by 1 shift(s)."

    with pytest.raises(RemovalBlockedError):
        ensure_valid(issues)


def test_location_edit_removing_unused_area_is_allowed():
    state = _state()
    kept = [Area(id="A1", name="Bar", sections=["Front Bar", "Beer Garden"])]
    assert check_location_edit(state, "L1", "Golden Lion", "1 Main St", kept) == []


def test_location_edit_rejected_as_a_whole():
    state = _state()
    areas = [
        Area(id="A2", name="Kitchen", sections=["Pass"]),
        Area(id="", name="kitchen", sections=[]),
    ]
    issues = check_location_edit(state, "L1", "", "1 Main St", areas)
    assert set(_rules(issues)) == {"required", "area_name", "area_in_use"}

    with pytest.raises(ValidationError) as exc:
        ensure_valid(issues)
    assert not isinstance(exc.value, RemovalBlockedError)
    assert len(exc.value.issues) == len(issues)


def test_renaming_used_section_is_blocked():
    state = _state()
    areas = [
        Area(id="A1", name="Bar", sections=["Front Counter", "Beer Garden"]),
        Area(id="A2", name="Kitchen", sections=["Pass"]),
    ]
    issues = check_location_edit(state, "L1", "Golden Lion", "1 Main St", areas)
    assert _rules(issues) == ["section_in_use"]
    assert issues[0].field == "areas.Bar.sections.Front Bar"
    assert issues[0].message == "In use by 1 shift(s); rename blocked."


def test_dropping_used_section_reports_removal():
    state = _state()
    areas = [
        Area(id="A1", name="Bar", sections=["Beer Garden"]),
        Area(id="A2", name="Kitchen", sections=["Pass"]),
    ]
    issues = check_location_edit(state, "L1", "Golden Lion", "1 Main St", areas)
    assert _rules(issues) == ["section_in_use"]
    assert issues[0].message == "Cannot remove; used by 1 shift(s)."


def test_renaming_unused_section_and_area_is_allowed():
    state = _state()
    areas = [
        Area(id="A1", name="Main Bar", sections=["Front Bar", "Garden"]),
        Area(id="A2", name="Kitchen", sections=["Pass", "Prep"]),
    ]
    assert check_location_edit(state, "L1", "Golden Lion", "1 Main St", areas) == []


def test_location_removal_blocked_while_rosters_refer_to_it():
    state = _state()
    issues = check_location_removal(state, "L1")
    assert _rules(issues) == ["location_in_use"]
    state.rosters = []
    assert check_location_removal(state, "L1") == []


# -- staff ------------------------------------------------------------------

def test_staff_valid():
    staff = StaffRecord(
        id="", name="Alex", role="Bartender", email="alex@example.com",
        pay_rate=0, availability=["Mon", "Sat"], locations=["L1"],
    )
    assert check_staff(staff) == []


def test_staff_invalid_fields():
    staff = StaffRecord(
        id="", name=" ", role="Bartender", email="not-an-email",
        pay_rate=-1, availability=["Mon", "Funday"], locations=[],
    )
    fields = {i.field for i in check_staff(staff)}
    assert fields == {"name", "email", "pay_rate", "availability[1]", "locations"}


# -- shifts and rosters -------------------------------------------------------

def _shift(**overrides) -> Shift:
    values = dict(id="S9", role="Chef", area_id="A2", section="Pass",
                  start="10:00", end="14:00", staff_id="sam")
    values.update(overrides)
    return Shift(**values)


def test_shift_valid():
    loc = _state().locations[0]
    assert check_shift(_shift(), loc) == []


def test_shift_time_issue_lands_on_end_field():
    loc = _state().locations[0]
    issues = check_shift(_shift(start="14:00", end="10:00"), loc, prefix="shifts[0].")
    assert issues == [ValidationIssue("shift_time", "shifts[0].end", MSG_END_BEFORE_START)]


def test_shift_required_fields_and_references():
    loc = _state().locations[0]
    assert _rules(check_shift(_shift(staff_id=None), loc)) == ["required"]
    assert _rules(check_shift(_shift(area_id="A9"), loc)) == ["area_ref"]
    assert _rules(check_shift(_shift(section="Prep"), loc)) == ["section_ref"]


def test_roster_needs_a_shift_unless_allowed():
    state = _state()
    empty = Roster(id="", date_iso="2026-03-15", location_id="L1")
    assert _rules(check_roster(state, empty)) == ["empty_roster"]
    assert check_roster(state, empty, RosterPolicy(allow_empty_rosters=True)) == []


def test_roster_unknown_location_and_bad_date():
    state = _state()
    roster = Roster(id="", date_iso="soon", location_id="L9", shifts=[_shift()])
    assert set(_rules(check_roster(state, roster))) == {"date", "location_ref"}


def test_roster_shift_issues_are_indexed():
    state = _state()
    roster = Roster(id="", date_iso="2026-03-15", location_id="L1", shifts=[
        _shift(), _shift(id="S10", start="12:00", end="11:00"),
    ])
    issues = check_roster(state, roster)
    assert [i.field for i in issues] == ["shifts[1].end"]


def test_validation_error_message():
    err = ValidationError([ValidationIssue("required", "name", MSG_REQUIRED)])
    assert str(err) == "[VALIDATION:required] name: required"
    ensure_valid([])
