"""
Roster Kernel: Selectors

Pure read-only queries over AppState. Never raise for missing optional
data: dangling ids resolve to None, absent filters to empty results.

Each selector remembers its last call. Calling it again with the same
state object (and equal scalar arguments) returns the identical result
object, so results must be treated as read-only.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .constants import TIME_PATTERN
from .domain_types import (
    AppState, Area, Location, Roster, RosterStats, Shift, StaffRecord,
)

_SCALARS = (str, int, float, bool, type(None))


def _memoize_last(fn: Callable) -> Callable:
    """Cache the most recent call, keyed on argument identity."""
    last: Dict[str, Any] = {}

    def _key(value: Any) -> Any:
        return value if isinstance(value, _SCALARS) else ("id", id(value))

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        key = (
            tuple(_key(a) for a in args),
            tuple((k, _key(v)) for k, v in sorted(kwargs.items())),
        )
        if last and last["key"] == key:
            return last["result"]
        result = fn(*args, **kwargs)
        # Holding the arguments keeps their ids from being reused.
        last.update(key=key, args=args, kwargs=kwargs, result=result)
        return result

    wrapper.cache_clear = last.clear
    return wrapper


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def find_location(state: AppState, location_id: Optional[str]) -> Optional[Location]:
    if not location_id:
        return None
    return next((loc for loc in state.locations if loc.id == location_id), None)


def find_area(location: Optional[Location], area_id: Optional[str]) -> Optional[Area]:
    if location is None or not area_id:
        return None
    return next((a for a in location.areas if a.id == area_id), None)


def find_staff(staff: Sequence[StaffRecord], staff_id: Optional[str]) -> Optional[StaffRecord]:
    if not staff_id:
        return None
    return next((s for s in staff if s.id == staff_id), None)


def find_roster(state: AppState, roster_id: Optional[str]) -> Optional[Roster]:
    if not roster_id:
        return None
    return next((r for r in state.rosters if r.id == roster_id), None)


# ---------------------------------------------------------------------------
# Scoped views
# ---------------------------------------------------------------------------

@_memoize_last
def active_location(state: AppState) -> Optional[Location]:
    return find_location(state, state.active_location_id)


@_memoize_last
def staff_by_location(state: AppState, location_id: Optional[str]) -> List[StaffRecord]:
    if not location_id:
        return []
    return [s for s in state.staff if location_id in (s.locations or [])]


@_memoize_last
def rosters_by_date(
    state: AppState, date_iso: str, location_id: Optional[str] = None,
) -> List[Roster]:
    return [
        r for r in state.rosters
        if r.date_iso == date_iso and (not location_id or r.location_id == location_id)
    ]


@_memoize_last
def rosters_in_month(
    state: AppState, year: int, month: int, location_id: Optional[str] = None,
) -> Dict[str, List[Roster]]:
    """Rosters grouped by day for a calendar month, days in date order."""
    prefix = f"{year:04d}-{month:02d}-"
    grouped: Dict[str, List[Roster]] = {}
    for r in state.rosters:
        if not r.date_iso.startswith(prefix):
            continue
        if location_id and r.location_id != location_id:
            continue
        grouped.setdefault(r.date_iso, []).append(r)
    return {day: grouped[day] for day in sorted(grouped)}


# ---------------------------------------------------------------------------
# Usage counts
# ---------------------------------------------------------------------------

def _location_shifts(state: AppState, location_id: str) -> List[Shift]:
    return [
        s
        for r in state.rosters
        if r.location_id == location_id
        for s in r.shifts
    ]


@_memoize_last
def area_usage_counts(state: AppState, location_id: str) -> Dict[str, int]:
    """Shifts referencing each area id, across all of the location's rosters."""
    counts: Dict[str, int] = {}
    for s in _location_shifts(state, location_id):
        if not s.area_id:
            continue
        counts[s.area_id] = counts.get(s.area_id, 0) + 1
    return counts


@_memoize_last
def section_usage_counts(state: AppState, location_id: str) -> Dict[str, Dict[str, int]]:
    """Shifts referencing each (area id, section name) pair."""
    counts: Dict[str, Dict[str, int]] = {}
    for s in _location_shifts(state, location_id):
        if not s.area_id:
            continue
        inner = counts.setdefault(s.area_id, {})
        inner[s.section] = inner.get(s.section, 0) + 1
    return counts


def area_usage(counts: Dict[str, int], area_id: Optional[str]) -> int:
    return counts.get(area_id, 0) if area_id else 0


def section_usage(
    counts: Dict[str, Dict[str, int]], area_id: Optional[str], section: str,
) -> int:
    if not area_id:
        return 0
    return counts.get(area_id, {}).get(section, 0)


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

def parse_minutes(value: Optional[str]) -> Optional[int]:
    """Minutes since midnight for "HH:mm", or None if malformed."""
    if not value or not TIME_PATTERN.match(value):
        return None
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def shift_hours(shift: Shift) -> float:
    """Duration in hours, clamped to zero for malformed or inverted times."""
    start = parse_minutes(shift.start)
    end = parse_minutes(shift.end)
    if start is None or end is None:
        return 0.0
    return max(0, end - start) / 60


@_memoize_last
def roster_stats(roster: Roster, staff_list: Sequence[StaffRecord]) -> RosterStats:
    """
    Hours, cost and shift count for a roster.
    Rounded to 2 dp once, after summing.
    """
    total_hours = 0.0
    total_cost = 0.0
    for shift in roster.shifts:
        hours = shift_hours(shift)
        total_hours += hours
        member = find_staff(staff_list, shift.staff_id)
        if member is not None and member.pay_rate:
            total_cost += hours * member.pay_rate
    return RosterStats(
        total_hours=round(total_hours, 2),
        total_cost=round(total_cost, 2),
        total_shifts=len(roster.shifts),
    )


# ---------------------------------------------------------------------------
# Timeline rows
# ---------------------------------------------------------------------------

@dataclass
class SectionRow:
    """One timeline row: a section of an area with its shifts by start time."""

    area_id: str
    area_name: str
    section: str
    shifts: List[Shift] = field(default_factory=list)


def shifts_by_section(roster: Roster, location: Location) -> List[SectionRow]:
    """
    One row per (area, section) of *location*, in the location's order.
    Shifts whose area or section no longer exists are left out; they
    show up in compute_diagnostics instead.
    """
    rows: List[SectionRow] = []
    index: Dict[tuple, SectionRow] = {}
    for area in location.areas:
        for section in area.sections:
            row = SectionRow(area_id=area.id, area_name=area.name, section=section)
            rows.append(row)
            index[(area.id, section)] = row
    for shift in roster.shifts:
        row = index.get((shift.area_id, shift.section))
        if row is not None:
            row.shifts.append(shift)
    for row in rows:
        row.shifts.sort(key=lambda s: (s.start, s.end))
    return rows
