"""
Roster Diff: pure function, no side effects.

Computes a structured diff between two versions of the same roster.
Shifts are matched by id.
"""

from __future__ import annotations

from typing import Dict, List

from roster_kernel.domain_types import Roster, Shift

_ROSTER_FIELDS = ("date_iso", "location_id", "title", "description")


def compare_rosters(before: Roster, after: Roster) -> dict:
    """
    Compare two rosters and return a structured diff.

    Returns dict with:
        changed_fields, added_shifts, removed_shifts, changed_shifts,
        shift_count_delta
    """
    changed_fields = [
        f for f in _ROSTER_FIELDS if getattr(before, f) != getattr(after, f)
    ]

    shifts_a: Dict[str, Shift] = {s.id: s for s in before.shifts}
    shifts_b: Dict[str, Shift] = {s.id: s for s in after.shifts}

    added = sorted(set(shifts_b) - set(shifts_a))
    removed = sorted(set(shifts_a) - set(shifts_b))

    changed: List[str] = []
    for sid in sorted(set(shifts_a) & set(shifts_b)):
        if shifts_a[sid] != shifts_b[sid]:
            changed.append(sid)

    return {
        "changed_fields": changed_fields,
        "added_shifts": added,
        "removed_shifts": removed,
        "changed_shifts": changed,
        "shift_count_delta": len(after.shifts) - len(before.shifts),
    }
