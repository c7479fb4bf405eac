"""
Roster Kernel
In-memory, action-driven state kernel for venue shift rostering.
"""

from .domain_types import (
    Area, AppState, Location, NewAreaInput, NewLocationInput, Roster,
    RosterPolicy, RosterStats, Shift, StaffRecord,
)
from .events import (
    BaseEvent,
    AddLocationsEvent,
    SetActiveLocationEvent,
    UpdateLocationEvent,
    RemoveLocationEvent,
    AddStaffEvent,
    UpdateStaffEvent,
    RemoveStaffEvent,
    AddRosterEvent,
    UpdateRosterEvent,
    RemoveRosterEvent,
)
from .engine import RosterStore
from .ids import make_id
from .diagnostics import compute_diagnostics
from .validation import (
    ValidationIssue,
    ValidationError,
    RemovalBlockedError,
    ensure_valid,
)

__all__ = [
    "Area",
    "AppState",
    "Location",
    "NewAreaInput",
    "NewLocationInput",
    "Roster",
    "RosterPolicy",
    "RosterStats",
    "Shift",
    "StaffRecord",
    "BaseEvent",
    "AddLocationsEvent",
    "SetActiveLocationEvent",
    "UpdateLocationEvent",
    "RemoveLocationEvent",
    "AddStaffEvent",
    "UpdateStaffEvent",
    "RemoveStaffEvent",
    "AddRosterEvent",
    "UpdateRosterEvent",
    "RemoveRosterEvent",
    "RosterStore",
    "make_id",
    "compute_diagnostics",
    "ValidationIssue",
    "ValidationError",
    "RemovalBlockedError",
    "ensure_valid",
]
