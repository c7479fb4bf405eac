"""
Roster Kernel: Diagnostics

Compute a diagnostic snapshot of the current state.
Dangling weak references are reported here as warnings; nothing in the
kernel raises for them.
"""

from __future__ import annotations

from typing import Dict, List, Set, Tuple

from .domain_types import AppState


def find_dangling_references(state: AppState) -> Dict[str, list]:
    """
    Collect weak references whose target no longer exists.

    Returns dict with:
        staff_locations: [(staff_id, location_id)]
        roster_locations: [roster_id]
        shift_staff: [(roster_id, shift_id, staff_id)]
        shift_areas: [(roster_id, shift_id, area_id)]
        shift_sections: [(roster_id, shift_id, section)]
    """
    location_ids = {loc.id for loc in state.locations}
    staff_ids = {s.id for s in state.staff}
    areas = {
        a.id: set(a.sections)
        for loc in state.locations
        for a in loc.areas
    }

    staff_locations: List[Tuple[str, str]] = [
        (s.id, lid)
        for s in state.staff
        for lid in (s.locations or [])
        if lid not in location_ids
    ]
    roster_locations = [r.id for r in state.rosters if r.location_id not in location_ids]

    shift_staff: List[Tuple[str, str, str]] = []
    shift_areas: List[Tuple[str, str, str]] = []
    shift_sections: List[Tuple[str, str, str]] = []
    for r in state.rosters:
        for s in r.shifts:
            if s.staff_id and s.staff_id not in staff_ids:
                shift_staff.append((r.id, s.id, s.staff_id))
            if s.area_id not in areas:
                shift_areas.append((r.id, s.id, s.area_id))
            elif s.section not in areas[s.area_id]:
                shift_sections.append((r.id, s.id, s.section))

    return {
        "staff_locations": staff_locations,
        "roster_locations": roster_locations,
        "shift_staff": shift_staff,
        "shift_areas": shift_areas,
        "shift_sections": shift_sections,
    }


def compute_diagnostics(state: AppState) -> dict:
    """Return a diagnostic dict summarising the current state health."""
    dangling = find_dangling_references(state)
    warnings: list[str] = []

    if state.active_location_id and state.active_location_id not in {
        loc.id for loc in state.locations
    }:
        warnings.append(
            f"Active location {state.active_location_id!r} no longer exists"
        )
    if dangling["staff_locations"]:
        warnings.append(
            f"{len(dangling['staff_locations'])} staff location reference(s) "
            f"point at removed locations"
        )
    if dangling["roster_locations"]:
        warnings.append(
            f"{len(dangling['roster_locations'])} roster(s) belong to removed "
            f"locations: {', '.join(dangling['roster_locations'])}"
        )
    if dangling["shift_staff"]:
        warnings.append(
            f"{len(dangling['shift_staff'])} shift(s) assigned to removed staff"
        )
    if dangling["shift_areas"]:
        warnings.append(
            f"{len(dangling['shift_areas'])} shift(s) reference missing areas"
        )
    if dangling["shift_sections"]:
        warnings.append(
            f"{len(dangling['shift_sections'])} shift(s) reference missing sections"
        )

    seen: Set[Tuple[str, str]] = set()
    doubled: Set[Tuple[str, str]] = set()
    for r in state.rosters:
        key = (r.location_id, r.date_iso)
        if key in seen:
            doubled.add(key)
        seen.add(key)
    for location_id, date_iso in sorted(doubled):
        warnings.append(
            f"Multiple rosters for location {location_id!r} on {date_iso}"
        )

    unassigned = sum(
        1 for r in state.rosters for s in r.shifts if not s.staff_id
    )

    return {
        "location_count": len(state.locations),
        "staff_count": len(state.staff),
        "roster_count": len(state.rosters),
        "shift_count": sum(len(r.shifts) for r in state.rosters),
        "unassigned_shift_count": unassigned,
        "dangling": dangling,
        "warnings": warnings,
    }
