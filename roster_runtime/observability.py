"""
Observability: in-process metrics collection.

No external dependencies. Uses compute_diagnostics + roster_stats + timing.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from roster_kernel.selectors import roster_stats

if TYPE_CHECKING:
    from .session import RosterSession


@dataclass(frozen=True)
class SessionMetrics:
    """Snapshot of observable session metrics."""

    stats_latency_ms: float
    location_count: int
    staff_count: int
    roster_count: int
    shift_count: int
    unassigned_shift_count: int
    total_hours: float
    total_cost: float
    warnings: list

    def to_dict(self) -> dict:
        return {
            "stats_latency_ms": self.stats_latency_ms,
            "location_count": self.location_count,
            "staff_count": self.staff_count,
            "roster_count": self.roster_count,
            "shift_count": self.shift_count,
            "unassigned_shift_count": self.unassigned_shift_count,
            "total_hours": self.total_hours,
            "total_cost": self.total_cost,
            "warnings": list(self.warnings),
        }


def collect_metrics(session: "RosterSession") -> SessionMetrics:
    """
    Collect metrics from a live session.

    Recomputes stats for every roster to measure the full-scan cost.
    """
    state = session.state

    start = time.perf_counter()
    all_stats = [roster_stats(r, state.staff) for r in state.rosters]
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    diagnostics = session.get_diagnostics()

    return SessionMetrics(
        stats_latency_ms=round(elapsed_ms, 2),
        location_count=diagnostics["location_count"],
        staff_count=diagnostics["staff_count"],
        roster_count=diagnostics["roster_count"],
        shift_count=diagnostics["shift_count"],
        unassigned_shift_count=diagnostics["unassigned_shift_count"],
        total_hours=round(sum(s.total_hours for s in all_stats), 2),
        total_cost=round(sum(s.total_cost for s in all_stats), 2),
        warnings=diagnostics["warnings"],
    )
