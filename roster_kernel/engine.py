"""
Roster Kernel: Store

Stateful container that wraps the pure functional transition layer.
Holds the single AppState, applies actions synchronously and notifies
subscribers after every change.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from .domain_types import AppState
from .events import BaseEvent
from .transitions import apply_event as _transition_apply

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


class RosterStore:
    """
    Injectable state container.

    Each instance is isolated; there is no module-level store. A dispatch
    either replaces the state wholesale or, for a no-op, leaves the same
    state object in place.
    """

    def __init__(self, state: Optional[AppState] = None) -> None:
        self._state: AppState = state if state is not None else AppState()
        self._listeners: List[Listener] = []

    # -- State access -------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    def get_state(self) -> AppState:
        """Current state. Callers must treat it as read-only."""
        return self._state

    # -- Subscription -------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register *listener*, called with the new state after each change.
        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- Public API ---------------------------------------------------------

    def dispatch(self, event: BaseEvent) -> None:
        """
        Apply a single action:
          1. Delegate to transitions.apply_event
          2. Store the new state
          3. Notify subscribers if the state object changed
        """
        new_state = _transition_apply(self._state, event)
        logger.debug("dispatch %s %s", event.event_type, _summarize(event))
        if new_state is self._state:
            logger.debug("%s left state unchanged", event.event_type)
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    def restore(self, state: AppState) -> None:
        """Put back a state previously read from this store."""
        if state is self._state:
            return
        logger.debug("restore state")
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def dispatch_all(self, events: Iterable[BaseEvent]) -> AppState:
        """Apply an ordered sequence of actions. Returns the final state."""
        for event in events:
            self.dispatch(event)
        return self._state


def _summarize(event: BaseEvent) -> dict:
    p = event.payload
    roster = p.get("roster")
    if roster is not None:
        return {
            "title": roster.title,
            "date_iso": roster.date_iso,
            "location_id": roster.location_id,
            "shift_count": len(roster.shifts),
        }
    if "locations" in p:
        return {"count": len(p["locations"])}
    if "id" in p:
        return {"id": p["id"]}
    return {}
