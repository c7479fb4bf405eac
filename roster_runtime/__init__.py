"""
Roster Runtime: validated command layer

Session API around the Roster Kernel: validate, then dispatch.
"""

from .session import RosterSession, UnknownEntityError
from .drift import compare_rosters
from .observability import SessionMetrics, collect_metrics

__all__ = [
    "RosterSession",
    "UnknownEntityError",
    "compare_rosters",
    "SessionMetrics",
    "collect_metrics",
]
