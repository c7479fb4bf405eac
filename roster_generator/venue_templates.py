"""
Venue Templates: realistic blueprints for demo data.

Each template names a venue's areas with their sections, the roles that
work there, and the trading hours shifts are drawn from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class AreaBlueprint:
    name: str
    sections: Tuple[str, ...]


@dataclass(frozen=True)
class RoleBlueprint:
    """A job title, the area it works in, and its hourly pay range."""

    title: str
    area: str
    pay_min: int
    pay_max: int


@dataclass(frozen=True)
class VenueTemplate:
    key: str
    venue_name: str
    address: str
    areas: Tuple[AreaBlueprint, ...]
    roles: Tuple[RoleBlueprint, ...]
    open_hour: int
    close_hour: int  # shifts end by this hour (<= 23)
    staff_names: Tuple[str, ...] = field(default_factory=tuple)


_STAFF_NAMES = (
    "Alex", "Sam", "Pat", "Jordan", "Taylor", "Morgan", "Casey", "Riley",
    "Jamie", "Quinn", "Avery", "Drew", "Harper", "Kai", "Rowan", "Sky",
)

_TEMPLATES: Dict[str, VenueTemplate] = {
    "pub": VenueTemplate(
        key="pub",
        venue_name="Golden Lion",
        address="1 Main St",
        areas=(
            AreaBlueprint("Bar", ("Front Bar", "Beer Garden")),
            AreaBlueprint("Kitchen", ("Pass", "Prep")),
            AreaBlueprint("Floor", ("Main", "Function Room")),
        ),
        roles=(
            RoleBlueprint("Bartender", "Bar", 28, 34),
            RoleBlueprint("Chef", "Kitchen", 32, 40),
            RoleBlueprint("Kitchen Hand", "Kitchen", 25, 28),
            RoleBlueprint("Waiter", "Floor", 26, 30),
        ),
        open_hour=8,
        close_hour=23,
        staff_names=_STAFF_NAMES,
    ),
    "cafe": VenueTemplate(
        key="cafe",
        venue_name="Corner Cup",
        address="12 Station Rd",
        areas=(
            AreaBlueprint("Counter", ("Coffee", "Till")),
            AreaBlueprint("Kitchen", ("Grill", "Cold Prep")),
            AreaBlueprint("Floor", ("Inside", "Courtyard")),
        ),
        roles=(
            RoleBlueprint("Barista", "Counter", 27, 31),
            RoleBlueprint("Cook", "Kitchen", 29, 35),
            RoleBlueprint("Floor Staff", "Floor", 25, 28),
        ),
        open_hour=6,
        close_hour=17,
        staff_names=_STAFF_NAMES,
    ),
}


def list_templates() -> List[str]:
    return sorted(_TEMPLATES)


def get_template(key: str) -> VenueTemplate:
    """Look up a venue template by key. Raises KeyError if unknown."""
    try:
        return _TEMPLATES[key]
    except KeyError:
        raise KeyError(
            f"Unknown venue template {key!r}. Valid: {list_templates()}"
        ) from None
