"""
Roster Kernel: Centralized Transition Logic

ALL state-mutation logic lives here.
Every handler is a pure step ``(state, event) -> new_state``. The input
state is never mutated. An update or removal that names an unknown id
returns the input state object itself (no-op).
"""

from __future__ import annotations

import copy
import dataclasses
from typing import Any, Dict, List

from .domain_types import Area, AppState, Location, Roster, StaffRecord
from .events import BaseEvent
from .ids import make_id


# ---------------------------------------------------------------------------
# Public dispatcher
# ---------------------------------------------------------------------------

def apply_event(state: AppState, event: BaseEvent) -> AppState:
    """
    Apply *event* to *state* and return the new state.
    Raises ValueError for an unknown event type.
    """
    etype = event.event_type

    if etype == "add_locations":
        return _apply_add_locations(state, event)
    elif etype == "set_active_location":
        return _apply_set_active_location(state, event)
    elif etype == "update_location":
        return _apply_update_location(state, event)
    elif etype == "remove_location":
        return _apply_remove_location(state, event)
    elif etype == "add_staff":
        return _apply_add_staff(state, event)
    elif etype == "update_staff":
        return _apply_update_staff(state, event)
    elif etype == "remove_staff":
        return _apply_remove_staff(state, event)
    elif etype == "add_roster":
        return _apply_add_roster(state, event)
    elif etype == "update_roster":
        return _apply_update_roster(state, event)
    elif etype == "remove_roster":
        return _apply_remove_roster(state, event)
    raise ValueError(f"Unknown event type: {etype}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _index_of(items: List[Any], item_id: str) -> int:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return -1


def _merge(record: Any, patch: Dict[str, Any]) -> Any:
    """Shallow merge; the id is never patched."""
    changes = {k: copy.deepcopy(v) for k, v in patch.items() if k != "id"}
    return dataclasses.replace(record, **changes)


# ---------------------------------------------------------------------------
# Individual transition handlers (private)
# ---------------------------------------------------------------------------

def _apply_add_locations(state: AppState, event: BaseEvent) -> AppState:
    inputs = event.payload.get("locations", [])
    if not inputs:
        return state

    created = [
        Location(
            id=make_id(),
            name=loc.name,
            address=loc.address,
            areas=[
                Area(id=make_id(), name=a.name, sections=list(a.sections))
                for a in loc.areas
            ],
        )
        for loc in inputs
    ]

    new_state = state.copy()
    new_state.locations.extend(created)
    if new_state.active_location_id is None:
        new_state.active_location_id = created[0].id
    return new_state


def _apply_set_active_location(state: AppState, event: BaseEvent) -> AppState:
    new_state = state.copy()
    new_state.active_location_id = event.payload.get("id")
    return new_state


def _apply_update_location(state: AppState, event: BaseEvent) -> AppState:
    p = event.payload
    idx = _index_of(state.locations, p["id"])
    if idx < 0:
        return state
    new_state = state.copy()
    new_state.locations[idx] = _merge(new_state.locations[idx], p.get("patch", {}))
    return new_state


def _apply_remove_location(state: AppState, event: BaseEvent) -> AppState:
    idx = _index_of(state.locations, event.payload["id"])
    if idx < 0:
        return state
    new_state = state.copy()
    del new_state.locations[idx]
    return new_state


def _apply_add_staff(state: AppState, event: BaseEvent) -> AppState:
    staff: StaffRecord = event.payload["staff"]
    new_state = state.copy()
    new_state.staff.append(dataclasses.replace(copy.deepcopy(staff), id=make_id()))
    return new_state


def _apply_update_staff(state: AppState, event: BaseEvent) -> AppState:
    p = event.payload
    idx = _index_of(state.staff, p["id"])
    if idx < 0:
        return state
    new_state = state.copy()
    new_state.staff[idx] = _merge(new_state.staff[idx], p.get("patch", {}))
    return new_state


def _apply_remove_staff(state: AppState, event: BaseEvent) -> AppState:
    idx = _index_of(state.staff, event.payload["id"])
    if idx < 0:
        return state
    new_state = state.copy()
    del new_state.staff[idx]
    return new_state


def _apply_add_roster(state: AppState, event: BaseEvent) -> AppState:
    roster: Roster = event.payload["roster"]
    new_state = state.copy()
    new_state.rosters.append(dataclasses.replace(copy.deepcopy(roster), id=make_id()))
    return new_state


def _apply_update_roster(state: AppState, event: BaseEvent) -> AppState:
    roster: Roster = event.payload["roster"]
    idx = _index_of(state.rosters, roster.id)
    if idx < 0:
        return state
    new_state = state.copy()
    new_state.rosters[idx] = copy.deepcopy(roster)
    return new_state


def _apply_remove_roster(state: AppState, event: BaseEvent) -> AppState:
    idx = _index_of(state.rosters, event.payload["id"])
    if idx < 0:
        return state
    new_state = state.copy()
    del new_state.rosters[idx]
    return new_state
