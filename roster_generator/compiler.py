"""
Demo Data Compiler: deterministic generator for a sample venue.

seed_demo(session, template, spec, seed) -> summary dict

Creates one location from the template, a staff list, and one roster
per day. Everything goes through the session, so generated data passes
the same validation as user input. A rule failure is reported as
GeneratorInvariantError.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional

from roster_kernel.domain_types import NewAreaInput, Roster, Shift, StaffRecord
from roster_kernel.constants import AVAILABILITY_DAYS
from roster_kernel.validation import ValidationError
from roster_runtime.session import RosterSession

from .deterministic_rng import DeterministicRNG
from .template_spec import DemoSpec
from .venue_templates import VenueTemplate


class GeneratorInvariantError(Exception):
    """Raised when generated data fails session validation."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"Generated demo data failed validation: {cause}")


def _hhmm(hour: int) -> str:
    return f"{hour:02d}:00"


def _staff_name(template: VenueTemplate, i: int) -> str:
    names = template.staff_names or ("Staff",)
    base = names[i % len(names)]
    rounds = i // len(names)
    return base if rounds == 0 else f"{base} {rounds + 1}"


def seed_demo(
    session: RosterSession,
    template: VenueTemplate,
    spec: DemoSpec,
    seed: int,
) -> dict:
    """
    Populate *session* with demo data. Returns a summary with the ids
    of the created location, staff and rosters.
    """
    problem = _spec_error(template, spec)
    if problem:
        raise GeneratorInvariantError(ValueError(problem))

    rng = DeterministicRNG(seed)
    before = session.state
    try:
        return _seed(session, template, spec, rng, seed)
    except ValidationError as exc:
        session.store.restore(before)
        raise GeneratorInvariantError(exc) from exc


def _spec_error(template: VenueTemplate, spec: DemoSpec) -> Optional[str]:
    """Reason the spec cannot produce valid rosters, or None."""
    try:
        date.fromisoformat(spec.start_date)
    except ValueError:
        return f"start_date {spec.start_date!r} is not YYYY-MM-DD"
    if spec.days < 1:
        return "days must be at least 1"
    if spec.staff_count < 1:
        return "staff_count must be at least 1"
    if spec.shifts_per_day < 1:
        return "shifts_per_day must be at least 1"
    if spec.min_shift_hours < 1 or spec.min_shift_hours > spec.max_shift_hours:
        return "min_shift_hours must be between 1 and max_shift_hours"
    if template.close_hour - template.open_hour < spec.min_shift_hours:
        return f"{template.key} is open for less than min_shift_hours"
    return None


def _seed(
    session: RosterSession,
    template: VenueTemplate,
    spec: DemoSpec,
    rng: DeterministicRNG,
    seed: int,
) -> dict:
    location = session.create_location(
        template.venue_name,
        template.address,
        [NewAreaInput(name=a.name, sections=list(a.sections)) for a in template.areas],
    )
    area_ids: Dict[str, str] = {a.name: a.id for a in location.areas}
    area_sections: Dict[str, List[str]] = {a.name: list(a.sections) for a in location.areas}

    # ── Staff: roles assigned round-robin so every role is covered ──
    staff_by_role: Dict[str, List[str]] = {}
    staff_ids: List[str] = []
    for i in range(spec.staff_count):
        role = template.roles[i % len(template.roles)]
        n_days = rng.rand_int(3, len(AVAILABILITY_DAYS))
        member = session.create_staff(StaffRecord(
            id="",
            name=_staff_name(template, i),
            role=role.title,
            pay_rate=float(rng.rand_int(role.pay_min, role.pay_max)),
            availability=rng.sample(AVAILABILITY_DAYS, n_days),
            locations=[location.id],
        ))
        staff_ids.append(member.id)
        staff_by_role.setdefault(role.title, []).append(member.id)

    # ── Rosters: one per day ──
    first_day = date.fromisoformat(spec.start_date)
    latest_start = template.close_hour - spec.min_shift_hours
    roster_ids: List[str] = []
    for d in range(spec.days):
        day = (first_day + timedelta(days=d)).isoformat()
        shifts: List[Shift] = []
        for _ in range(spec.shifts_per_day):
            role = rng.rand_choice(template.roles)
            start = rng.rand_int(template.open_hour, latest_start)
            longest = min(spec.max_shift_hours, template.close_hour - start)
            length = rng.rand_int(spec.min_shift_hours, longest)
            candidates = staff_by_role.get(role.title) or staff_ids
            shifts.append(Shift(
                id="",
                role=role.title,
                area_id=area_ids[role.area],
                section=rng.rand_choice(area_sections[role.area]),
                staff_id=rng.rand_choice(candidates) if candidates else None,
                start=_hhmm(start),
                end=_hhmm(start + length),
            ))
        roster = session.create_roster(Roster(
            id="",
            date_iso=day,
            location_id=location.id,
            title=f"{template.venue_name} {day}",
            shifts=shifts,
        ))
        roster_ids.append(roster.id)

    return {
        "template": template.key,
        "seed": seed,
        "spec": spec.to_dict(),
        "location_id": location.id,
        "staff_ids": staff_ids,
        "roster_ids": roster_ids,
    }
