"""
Roster Kernel: Validation Rules

Pure predicates that gate mutations before they reach the store.

Single-value rules return None when valid or a reason message.
Aggregate checks return a list of ValidationIssue; ensure_valid turns a
non-empty list into a ValidationError. The store itself never rejects a
well-formed action.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from .constants import (
    AVAILABILITY_DAYS, DATE_PATTERN, EMAIL_PATTERN, TIME_PATTERN,
    MSG_BAD_DATE, MSG_BAD_DAY, MSG_BAD_EMAIL, MSG_BAD_TIME,
    MSG_DUPLICATE_AREA, MSG_DUPLICATE_SECTION, MSG_EMPTY_ROSTER,
    MSG_END_BEFORE_START, MSG_NEGATIVE_PAY, MSG_REQUIRED,
    MSG_UNKNOWN_AREA, MSG_UNKNOWN_SECTION,
)
from .domain_types import (
    AppState, Area, Location, NewLocationInput, Roster, RosterPolicy,
    Shift, StaffRecord,
)
from .selectors import (
    area_usage, area_usage_counts, find_location, section_usage,
    section_usage_counts,
)


@dataclass(frozen=True)
class ValidationIssue:
    """One failed rule. ``field`` is a dotted/indexed path into the input."""

    rule: str
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"rule": self.rule, "field": self.field, "message": self.message}


class ValidationError(Exception):
    """Raised when a command fails one or more validation rules."""

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        self.issues = list(issues)
        detail = "; ".join(f"{i.field}: {i.message}" for i in self.issues)
        rule = self.issues[0].rule if self.issues else "unknown"
        super().__init__(f"[VALIDATION:{rule}] {detail}")


class RemovalBlockedError(ValidationError):
    """Raised when a removal is blocked because shifts still reference the target."""


def ensure_valid(issues: Sequence[ValidationIssue]) -> None:
    if not issues:
        return
    if all(i.rule in _BLOCKING_RULES for i in issues):
        raise RemovalBlockedError(issues)
    raise ValidationError(issues)


_BLOCKING_RULES = {"area_in_use", "section_in_use", "location_in_use"}

_TIME_RULES = {
    MSG_REQUIRED: "required",
    MSG_BAD_TIME: "time_format",
    MSG_END_BEFORE_START: "shift_time",
}


# ---------------------------------------------------------------------------
# Single-value rules
# ---------------------------------------------------------------------------

def required_error(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return MSG_REQUIRED
    return None


def shift_time_error(start: Optional[str], end: Optional[str]) -> Optional[str]:
    """
    Both times required, both "HH:mm", and strictly start < end.
    Lexical comparison is exact because the format is zero-padded 24h.
    """
    if not start or not end:
        return MSG_REQUIRED
    if not TIME_PATTERN.match(start) or not TIME_PATTERN.match(end):
        return MSG_BAD_TIME
    if not start < end:
        return MSG_END_BEFORE_START
    return None


def date_error(date_iso: Optional[str]) -> Optional[str]:
    if not date_iso:
        return MSG_REQUIRED
    if not DATE_PATTERN.match(date_iso):
        return MSG_BAD_DATE
    try:
        date.fromisoformat(date_iso)
    except ValueError:
        return MSG_BAD_DATE
    return None


def _name_key(name: str) -> str:
    return name.strip().lower()


def _name_errors(names: Sequence[str], duplicate_message: str) -> List[Optional[str]]:
    counts: Dict[str, int] = {}
    for name in names:
        key = _name_key(name)
        if key:
            counts[key] = counts.get(key, 0) + 1
    errors: List[Optional[str]] = []
    for name in names:
        key = _name_key(name)
        if not key:
            errors.append(MSG_REQUIRED)
        elif counts[key] > 1:
            errors.append(duplicate_message)
        else:
            errors.append(None)
    return errors


def area_name_errors(names: Sequence[str]) -> List[Optional[str]]:
    """Per-name reason (or None) for the area names of one location."""
    return _name_errors(names, MSG_DUPLICATE_AREA)


def section_name_errors(sections: Sequence[str]) -> List[Optional[str]]:
    """Per-name reason (or None) for the sections of one area."""
    return _name_errors(sections, MSG_DUPLICATE_SECTION)


def area_removal_error(usage: int) -> Optional[str]:
    if usage > 0:
        return f"Cannot remove; used by {usage} shift(s)."
    return None


def section_removal_error(usage: int) -> Optional[str]:
    if usage > 0:
        return f"Cannot remove; used by {usage} shift(s)."
    return None


def section_rename_error(usage: int) -> Optional[str]:
    if usage > 0:
        return f"In use by {usage} shift(s); rename blocked."
    return None


def can_remove_area(state: AppState, location_id: str, area_id: str) -> bool:
    return area_usage(area_usage_counts(state, location_id), area_id) == 0


def can_remove_section(
    state: AppState, location_id: str, area_id: str, section: str,
) -> bool:
    return section_usage(section_usage_counts(state, location_id), area_id, section) == 0


# ---------------------------------------------------------------------------
# Aggregate checks
# ---------------------------------------------------------------------------

def _check_areas(
    areas: Sequence, prefix: str = "areas",
) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for i, err in enumerate(area_name_errors([a.name for a in areas])):
        if err:
            issues.append(ValidationIssue("area_name", f"{prefix}[{i}].name", err))
    for i, area in enumerate(areas):
        for j, err in enumerate(section_name_errors(area.sections)):
            if err:
                issues.append(ValidationIssue(
                    "section_name", f"{prefix}[{i}].sections[{j}]", err,
                ))
    return issues


def check_new_locations(inputs: Sequence[NewLocationInput]) -> List[ValidationIssue]:
    """Creation form for one or more locations with their areas."""
    issues: List[ValidationIssue] = []
    for i, loc in enumerate(inputs):
        for fname in ("name", "address"):
            err = required_error(getattr(loc, fname))
            if err:
                issues.append(ValidationIssue("required", f"locations[{i}].{fname}", err))
        issues.extend(_check_areas(loc.areas, prefix=f"locations[{i}].areas"))
    return issues


def check_location_edit(
    state: AppState,
    location_id: str,
    name: str,
    address: str,
    areas: Sequence[Area],
) -> List[ValidationIssue]:
    """
    Whole-form check for a location edit.

    Any name failure or any blocked removal rejects the edit as a whole.
    A section that disappears from an existing area is a removal, or a
    rename when a new name takes its slot. Either is blocked while shifts
    still use the section.
    """
    issues: List[ValidationIssue] = []
    for fname, value in (("name", name), ("address", address)):
        err = required_error(value)
        if err:
            issues.append(ValidationIssue("required", fname, err))
    issues.extend(_check_areas(areas))

    current = find_location(state, location_id)
    if current is None:
        return issues

    a_counts = area_usage_counts(state, location_id)
    s_counts = section_usage_counts(state, location_id)
    edited = {a.id: a for a in areas if a.id}

    for area in current.areas:
        kept = edited.get(area.id)
        if kept is None:
            err = area_removal_error(area_usage(a_counts, area.id))
            if err:
                issues.append(ValidationIssue("area_in_use", f"areas.{area.name}", err))
            continue
        remaining = set(kept.sections)
        previous = set(area.sections)
        for pos, section in enumerate(area.sections):
            if section in remaining:
                continue
            usage = section_usage(s_counts, area.id, section)
            # A new name in the same slot is a rename of this section.
            renamed = pos < len(kept.sections) and kept.sections[pos] not in previous
            if renamed:
                err = section_rename_error(usage)
            else:
                err = section_removal_error(usage)
            if err:
                issues.append(ValidationIssue(
                    "section_in_use", f"areas.{area.name}.sections.{section}", err,
                ))
    return issues


def check_location_removal(state: AppState, location_id: str) -> List[ValidationIssue]:
    """A location is removable only while no roster refers to it."""
    count = sum(1 for r in state.rosters if r.location_id == location_id)
    if count:
        return [ValidationIssue(
            "location_in_use", "id",
            f"Cannot remove; used by {count} roster(s).",
        )]
    return []


def check_staff(staff: StaffRecord) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for fname in ("name", "role"):
        err = required_error(getattr(staff, fname))
        if err:
            issues.append(ValidationIssue("required", fname, err))
    if staff.pay_rate is not None and staff.pay_rate < 0:
        issues.append(ValidationIssue("pay_rate", "pay_rate", MSG_NEGATIVE_PAY))
    if staff.email and not EMAIL_PATTERN.match(staff.email):
        issues.append(ValidationIssue("email", "email", MSG_BAD_EMAIL))
    for i, day in enumerate(staff.availability or []):
        if day not in AVAILABILITY_DAYS:
            issues.append(ValidationIssue("availability", f"availability[{i}]", MSG_BAD_DAY))
    if not staff.locations:
        issues.append(ValidationIssue(
            "required", "locations", "select at least one location",
        ))
    return issues


def check_shift(
    shift: Shift, location: Optional[Location], prefix: str = "",
) -> List[ValidationIssue]:
    """Required fields, time order, and area/section membership in *location*."""
    issues: List[ValidationIssue] = []
    for fname in ("staff_id", "role", "area_id", "section"):
        err = required_error(getattr(shift, fname))
        if err:
            issues.append(ValidationIssue("required", f"{prefix}{fname}", err))
    err = shift_time_error(shift.start, shift.end)
    if err:
        issues.append(ValidationIssue(_TIME_RULES[err], f"{prefix}end", err))

    if location is None or not shift.area_id:
        return issues
    area = next((a for a in location.areas if a.id == shift.area_id), None)
    if area is None:
        issues.append(ValidationIssue("area_ref", f"{prefix}area_id", MSG_UNKNOWN_AREA))
    elif shift.section and shift.section not in area.sections:
        issues.append(ValidationIssue("section_ref", f"{prefix}section", MSG_UNKNOWN_SECTION))
    return issues


def check_roster(
    state: AppState, roster: Roster, policy: RosterPolicy = RosterPolicy(),
) -> List[ValidationIssue]:
    """Submission check for a roster, its shifts included."""
    issues: List[ValidationIssue] = []
    err = date_error(roster.date_iso)
    if err:
        issues.append(ValidationIssue("date", "date_iso", err))

    location = find_location(state, roster.location_id)
    if location is None:
        issues.append(ValidationIssue(
            "location_ref", "location_id", "unknown location",
        ))

    if not roster.shifts and not policy.allow_empty_rosters:
        issues.append(ValidationIssue("empty_roster", "shifts", MSG_EMPTY_ROSTER))

    for i, shift in enumerate(roster.shifts):
        issues.extend(check_shift(shift, location, prefix=f"shifts[{i}]."))
    return issues
