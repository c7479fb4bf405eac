"""
Roster Kernel: Core Domain Types

Pure data. No behaviour, no transition logic.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Location:
    A venue. Owns its areas.

Area:
    A named part of a venue (Bar, Kitchen). Holds an ordered list of
    section names. Sections are plain strings, not entities.

Roster:
    The full staffing plan for one location on one calendar day.

Shift:
    One block of work inside a roster, placed in an (area, section)
    and optionally assigned to a staff member. Times are "HH:mm".

Weak reference:
    An id field with no enforced target. Reads resolve a dangling id
    to None instead of failing.

────────────────────────────────────────────────
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import List, Optional

from .constants import ALLOW_EMPTY_ROSTERS


# ── Entities ──────────────────────────────────────────────────

@dataclass
class Area:
    """A part of a location. Identity of a section is string equality."""

    id: str
    name: str
    sections: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "sections": list(self.sections)}


@dataclass
class Location:
    """A venue. Areas are owned and go away with the location."""

    id: str
    name: str
    address: str
    areas: List[Area] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "areas": [a.to_dict() for a in self.areas],
        }


@dataclass
class StaffRecord:
    """A staff member. ``locations`` holds weak references to Location ids."""

    id: str
    name: str
    role: str
    email: Optional[str] = None
    phone: Optional[str] = None
    pay_rate: Optional[float] = None
    availability: List[str] = field(default_factory=list)  # Mon..Sun
    locations: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "email": self.email,
            "phone": self.phone,
            "pay_rate": self.pay_rate,
            "availability": list(self.availability or []),
            "locations": list(self.locations or []),
        }


@dataclass
class Shift:
    """
    A block of work on a roster's day.

    ``area_id``, ``section`` and ``staff_id`` are weak references.
    ``start`` and ``end`` are zero-padded 24h "HH:mm" strings.
    """

    id: str
    role: str
    area_id: str
    section: str
    start: str
    end: str
    staff_id: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "area_id": self.area_id,
            "section": self.section,
            "staff_id": self.staff_id,
            "notes": self.notes,
            "start": self.start,
            "end": self.end,
        }


@dataclass
class Roster:
    """One location's staffing plan for one calendar day (YYYY-MM-DD)."""

    id: str
    date_iso: str
    location_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    shifts: List[Shift] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date_iso": self.date_iso,
            "location_id": self.location_id,
            "title": self.title,
            "description": self.description,
            "shifts": [s.to_dict() for s in self.shifts],
        }


# ── Creation inputs (no ids yet) ──────────────────────────────

@dataclass
class NewAreaInput:
    name: str
    sections: List[str] = field(default_factory=list)


@dataclass
class NewLocationInput:
    name: str
    address: str
    areas: List[NewAreaInput] = field(default_factory=list)


# ── Policy and derived values ─────────────────────────────────

@dataclass(frozen=True)
class RosterPolicy:
    """
    Save-time policy switches, injected into the session.

    allow_empty_rosters: accept a roster with zero shifts on create/update.
    """

    allow_empty_rosters: bool = ALLOW_EMPTY_ROSTERS


@dataclass(frozen=True)
class RosterStats:
    """Aggregates for a single roster. Totals are rounded to 2 dp."""

    total_hours: float = 0.0
    total_cost: float = 0.0
    total_shifts: int = 0

    def to_dict(self) -> dict:
        return {
            "total_hours": self.total_hours,
            "total_cost": self.total_cost,
            "total_shifts": self.total_shifts,
        }


# ── Application state ─────────────────────────────────────────

@dataclass
class AppState:
    """
    Complete application state.

    active_location_id scopes most displayed views. It is not checked
    against ``locations``.
    """

    locations: List[Location] = field(default_factory=list)
    staff: List[StaffRecord] = field(default_factory=list)
    rosters: List[Roster] = field(default_factory=list)
    active_location_id: Optional[str] = None

    def copy(self) -> "AppState":
        """Deep-copy the entire state for immutable transitions."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        """Serialise state to a plain dict (for the API / logging)."""
        return {
            "locations": [loc.to_dict() for loc in self.locations],
            "staff": [s.to_dict() for s in self.staff],
            "rosters": [r.to_dict() for r in self.rosters],
            "active_location_id": self.active_location_id,
        }
