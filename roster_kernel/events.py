"""
Roster Kernel: Action Definitions

Actions are **pure data**. They carry intent and payload only.
They contain ZERO transition logic; see transitions.py.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


@dataclass
class BaseEvent:
    """Base for all store actions: pure data container."""

    event_type: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "payload": _plain(self.payload),
        }


@dataclass
class AddLocationsEvent(BaseEvent):
    """Create locations (and their areas) from id-less inputs."""

    event_type: str = "add_locations"
    # payload keys: locations (list of NewLocationInput)


@dataclass
class SetActiveLocationEvent(BaseEvent):
    """Replace the active location id. No existence check."""

    event_type: str = "set_active_location"
    # payload keys: id (str or None)


@dataclass
class UpdateLocationEvent(BaseEvent):
    """Shallow-merge a patch into a location. ``areas`` replaces wholesale."""

    event_type: str = "update_location"
    # payload keys: id, patch (dict of Location field -> value)


@dataclass
class RemoveLocationEvent(BaseEvent):
    """Remove a location. Rosters and staff references are left alone."""

    event_type: str = "remove_location"
    # payload keys: id


@dataclass
class AddStaffEvent(BaseEvent):
    """Append a staff record under a fresh id."""

    event_type: str = "add_staff"
    # payload keys: staff (StaffRecord; its id is ignored)


@dataclass
class UpdateStaffEvent(BaseEvent):
    event_type: str = "update_staff"
    # payload keys: id, patch (dict of StaffRecord field -> value)


@dataclass
class RemoveStaffEvent(BaseEvent):
    """Remove a staff record. Shifts keep their staff_id."""

    event_type: str = "remove_staff"
    # payload keys: id


@dataclass
class AddRosterEvent(BaseEvent):
    """Append a roster under a fresh id."""

    event_type: str = "add_roster"
    # payload keys: roster (Roster; its id is ignored)


@dataclass
class UpdateRosterEvent(BaseEvent):
    """Replace the roster with the same id, shifts included."""

    event_type: str = "update_roster"
    # payload keys: roster (Roster)


@dataclass
class RemoveRosterEvent(BaseEvent):
    event_type: str = "remove_roster"
    # payload keys: id
