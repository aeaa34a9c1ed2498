"""Scheduled expiry events for a game session.

Flights landing in the dock, hint highlights and combo popups all end at a
known time. They are queued here and dispatched in due order when the
session is advanced, instead of relying on free-running timers.
"""
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, List, Optional
from enum import Enum


class EventKind(str, Enum):
    """Scheduled event kinds."""
    FLIGHT_LANDED = "flight_landed"
    HINT_EXPIRED = "hint_expired"
    COMBO_POPUP_EXPIRED = "combo_popup_expired"


@dataclass(order=True)
class ScheduledEvent:
    """An event due at a point in session time."""
    due_at: float
    seq: int
    kind: EventKind = field(compare=False)
    payload: Any = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)


class EventScheduler:
    """Min-heap of scheduled events, ordered by due time then insertion."""

    def __init__(self):
        self._heap: List[ScheduledEvent] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return sum(1 for e in self._heap if not e.cancelled)

    def schedule(self, due_at: float, kind: EventKind, payload: Any = None) -> ScheduledEvent:
        event = ScheduledEvent(due_at, next(self._counter), EventKind(kind), payload)
        heapq.heappush(self._heap, event)
        return event

    def cancel(self, kind: Optional[EventKind] = None, payload: Any = None) -> int:
        """Cancel pending events matching kind (and payload, if given)."""
        cancelled = 0
        for event in self._heap:
            if event.cancelled:
                continue
            if kind is not None and event.kind != kind:
                continue
            if payload is not None and event.payload != payload:
                continue
            event.cancelled = True
            cancelled += 1
        return cancelled

    def clear(self) -> None:
        self._heap.clear()

    def next_due(self) -> Optional[float]:
        self._drop_cancelled()
        return self._heap[0].due_at if self._heap else None

    def pop_due(self, now: float) -> Optional[ScheduledEvent]:
        """Remove and return the earliest event due at or before ``now``."""
        self._drop_cancelled()
        if self._heap and self._heap[0].due_at <= now:
            return heapq.heappop(self._heap)
        return None

    def _drop_cancelled(self) -> None:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)
