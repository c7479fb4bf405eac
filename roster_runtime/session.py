"""
Roster Session: validated command API over the store.

Validate-before-dispatch order:
  1. normalise the input (trim names, assign ids to new areas/shifts)
  2. run the validation rules     (may raise ValidationError)
  3. store.dispatch(action)       (only if step 2 succeeded)

The store never sees a command that failed validation, so a rejected
submission leaves the state untouched.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from roster_kernel.domain_types import (
    AppState, Area, Location, NewAreaInput, NewLocationInput, Roster,
    RosterPolicy, RosterStats, Shift, StaffRecord,
)
from roster_kernel.engine import RosterStore
from roster_kernel.events import (
    AddLocationsEvent,
    AddRosterEvent,
    AddStaffEvent,
    RemoveLocationEvent,
    RemoveRosterEvent,
    RemoveStaffEvent,
    SetActiveLocationEvent,
    UpdateLocationEvent,
    UpdateRosterEvent,
    UpdateStaffEvent,
)
from roster_kernel.diagnostics import compute_diagnostics
from roster_kernel.ids import make_id
from roster_kernel import selectors
from roster_kernel.validation import (
    ValidationIssue,
    check_location_edit,
    check_location_removal,
    check_new_locations,
    check_roster,
    check_staff,
    ensure_valid,
)

from .drift import compare_rosters

logger = logging.getLogger(__name__)

# Optional staff fields that are stored as lists; None means empty.
_LIST_FIELDS = ("availability", "locations")


class UnknownEntityError(KeyError):
    """Raised when a command names a location, staff member, roster or shift that does not exist."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)

    def __str__(self) -> str:
        return self.detail


class RosterSession:
    """
    CRUD + validation boundary around a RosterStore.

    Unknown ids raise UnknownEntityError here, unlike the store where
    they are no-ops. Failed rules raise ValidationError (or
    RemovalBlockedError).
    """

    def __init__(
        self,
        store: Optional[RosterStore] = None,
        policy: Optional[RosterPolicy] = None,
    ) -> None:
        self._store = store if store is not None else RosterStore()
        self._policy = policy or RosterPolicy()

    # ------------------------------------------------------------------
    # Delegates
    # ------------------------------------------------------------------

    @property
    def store(self) -> RosterStore:
        return self._store

    @property
    def policy(self) -> RosterPolicy:
        return self._policy

    @property
    def state(self) -> AppState:
        return self._store.state

    def get_state(self) -> dict:
        """Return current state as dict."""
        return self._store.state.to_dict()

    def get_diagnostics(self) -> dict:
        return compute_diagnostics(self._store.state)

    def get_metrics(self) -> "SessionMetrics":
        """Collect metrics from the current session."""
        from .observability import collect_metrics
        return collect_metrics(self)

    def _check(self, command: str, issues: List[ValidationIssue]) -> None:
        if issues:
            logger.info(
                "%s rejected: %s", command,
                "; ".join(f"{i.field}: {i.message}" for i in issues),
            )
        ensure_valid(issues)

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def create_locations(self, inputs: Sequence[NewLocationInput]) -> List[Location]:
        """
        Create several locations at once. The first one becomes active
        if no location is active yet. Returns the created locations.
        """
        cleaned = [
            NewLocationInput(
                name=loc.name.strip(),
                address=loc.address.strip(),
                areas=[
                    NewAreaInput(
                        name=a.name.strip(),
                        sections=[s.strip() for s in a.sections if s.strip()],
                    )
                    for a in loc.areas
                ],
            )
            for loc in inputs
        ]
        self._check("create_locations", check_new_locations(cleaned))
        before = len(self.state.locations)
        self._store.dispatch(AddLocationsEvent(payload={"locations": cleaned}))
        return self.state.locations[before:]

    def create_location(
        self, name: str, address: str, areas: Iterable[NewAreaInput] = (),
    ) -> Location:
        return self.create_locations(
            [NewLocationInput(name=name, address=address, areas=list(areas))]
        )[0]

    def set_active_location(self, location_id: Optional[str]) -> None:
        self._store.dispatch(SetActiveLocationEvent(payload={"id": location_id}))

    def get_location(self, location_id: str) -> Location:
        loc = selectors.find_location(self.state, location_id)
        if loc is None:
            raise UnknownEntityError(f"Location {location_id!r} does not exist")
        return loc

    def update_location(
        self,
        location_id: str,
        name: Optional[str] = None,
        address: Optional[str] = None,
        areas: Optional[Sequence[Area]] = None,
    ) -> Location:
        """
        Save a location edit. Areas without an id are new and get one.
        The edit is checked as a whole; nothing is saved on failure.
        """
        current = self.get_location(location_id)
        new_name = (current.name if name is None else name).strip()
        new_address = (current.address if address is None else address).strip()

        patch: Dict[str, object] = {"name": new_name, "address": new_address}
        edited_areas = current.areas
        if areas is not None:
            edited_areas = [
                Area(
                    id=a.id or make_id(),
                    name=a.name.strip(),
                    sections=[s.strip() for s in a.sections],
                )
                for a in areas
            ]
            patch["areas"] = edited_areas

        self._check(
            "update_location",
            check_location_edit(
                self.state, location_id, new_name, new_address, edited_areas,
            ),
        )
        self._store.dispatch(UpdateLocationEvent(payload={"id": location_id, "patch": patch}))
        return self.get_location(location_id)

    def delete_location(self, location_id: str) -> None:
        self.get_location(location_id)
        self._check("delete_location", check_location_removal(self.state, location_id))
        self._store.dispatch(RemoveLocationEvent(payload={"id": location_id}))

    def get_usage_counts(self, location_id: str) -> dict:
        return {
            "areas": selectors.area_usage_counts(self.state, location_id),
            "sections": selectors.section_usage_counts(self.state, location_id),
        }

    # ------------------------------------------------------------------
    # Staff
    # ------------------------------------------------------------------

    def get_staff(self, staff_id: str) -> StaffRecord:
        member = selectors.find_staff(self.state.staff, staff_id)
        if member is None:
            raise UnknownEntityError(f"Staff {staff_id!r} does not exist")
        return member

    def create_staff(self, staff: StaffRecord) -> StaffRecord:
        cleaned = dataclasses.replace(
            staff,
            name=staff.name.strip(),
            role=staff.role.strip(),
            availability=list(staff.availability or []),
            locations=list(staff.locations or []),
        )
        self._check("create_staff", check_staff(cleaned))
        self._store.dispatch(AddStaffEvent(payload={"staff": cleaned}))
        return self.state.staff[-1]

    def update_staff(self, staff_id: str, **patch) -> StaffRecord:
        current = self.get_staff(staff_id)
        patch.pop("id", None)
        for key in _LIST_FIELDS:
            if key in patch and patch[key] is None:
                patch[key] = []
        self._check("update_staff", check_staff(dataclasses.replace(current, **patch)))
        self._store.dispatch(UpdateStaffEvent(payload={"id": staff_id, "patch": patch}))
        return self.get_staff(staff_id)

    def delete_staff(self, staff_id: str) -> None:
        self.get_staff(staff_id)
        self._store.dispatch(RemoveStaffEvent(payload={"id": staff_id}))

    # ------------------------------------------------------------------
    # Rosters
    # ------------------------------------------------------------------

    def get_roster(self, roster_id: str) -> Roster:
        roster = selectors.find_roster(self.state, roster_id)
        if roster is None:
            raise UnknownEntityError(f"Roster {roster_id!r} does not exist")
        return roster

    @staticmethod
    def _with_shift_ids(roster: Roster) -> Roster:
        return dataclasses.replace(
            roster,
            shifts=[
                s if s.id else dataclasses.replace(s, id=make_id())
                for s in roster.shifts
            ],
        )

    def create_roster(self, roster: Roster) -> Roster:
        """Validate and append a roster. Its own id is ignored."""
        prepared = self._with_shift_ids(roster)
        self._check("create_roster", check_roster(self.state, prepared, self._policy))
        self._store.dispatch(AddRosterEvent(payload={"roster": prepared}))
        return self.state.rosters[-1]

    def update_roster(self, roster: Roster) -> Roster:
        """Validate and replace the roster with the same id."""
        current = self.get_roster(roster.id)
        prepared = self._with_shift_ids(roster)
        self._check("update_roster", check_roster(self.state, prepared, self._policy))
        logger.debug("update_roster %s diff=%s", roster.id, compare_rosters(current, prepared))
        self._store.dispatch(UpdateRosterEvent(payload={"roster": prepared}))
        return self.get_roster(roster.id)

    def save_shift(self, roster_id: str, shift: Shift) -> Roster:
        """Insert *shift* into the roster, or replace the shift with its id."""
        current = self.get_roster(roster_id)
        shifts = list(current.shifts)
        idx = next((i for i, s in enumerate(shifts) if shift.id and s.id == shift.id), -1)
        if idx < 0:
            shifts.append(shift)
        else:
            shifts[idx] = shift
        return self.update_roster(dataclasses.replace(current, shifts=shifts))

    def remove_shift(self, roster_id: str, shift_id: str) -> Roster:
        current = self.get_roster(roster_id)
        shifts = [s for s in current.shifts if s.id != shift_id]
        if len(shifts) == len(current.shifts):
            raise UnknownEntityError(f"Shift {shift_id!r} does not exist in roster {roster_id!r}")
        return self.update_roster(dataclasses.replace(current, shifts=shifts))

    def delete_roster(self, roster_id: str) -> None:
        self.get_roster(roster_id)
        self._store.dispatch(RemoveRosterEvent(payload={"id": roster_id}))

    def get_rosters_by_date(
        self, date_iso: str, location_id: Optional[str] = None,
    ) -> List[Roster]:
        return selectors.rosters_by_date(self.state, date_iso, location_id)

    def get_roster_stats(self, roster_id: str) -> RosterStats:
        roster = self.get_roster(roster_id)
        return selectors.roster_stats(roster, self.state.staff)
