"""
Deterministic Demo Data Generator.

Populates a RosterSession with a sample venue, staff and daily rosters.
"""

from .compiler import seed_demo, GeneratorInvariantError
from .deterministic_rng import DeterministicRNG
from .template_spec import DemoSpec
from .venue_templates import VenueTemplate, get_template, list_templates

__all__ = [
    "seed_demo",
    "GeneratorInvariantError",
    "DeterministicRNG",
    "DemoSpec",
    "VenueTemplate",
    "get_template",
    "list_templates",
]
