"""Event calendar: target events read by the projector and plan selector.

Supports A/B/C priorities for seasons with several target events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from load_engine.models.enums import EventPriority


@dataclass(frozen=True)
class Event:
    """A single event on the athlete's calendar."""

    event_date: date
    priority: EventPriority
    name: str
    event_id: str | None = None


@dataclass(frozen=True)
class EventCalendar:
    """Frozen calendar of events with query helpers.

    Entries are stored sorted chronologically. Use ``from_entries()``
    factory to build from unsorted inputs.
    """

    entries: tuple[Event, ...] = field(default_factory=tuple)

    # -- Factory ----------------------------------------------------------

    @classmethod
    def from_entries(cls, *entries: Event) -> EventCalendar:
        """Create an EventCalendar with entries sorted chronologically."""
        return cls(entries=tuple(sorted(entries, key=lambda e: e.event_date)))

    # -- Query helpers ----------------------------------------------------

    def next_event(self, as_of: date) -> Event | None:
        """Return the next event on or after *as_of*, any priority."""
        for entry in self.entries:
            if entry.event_date >= as_of:
                return entry
        return None

    def next_event_by_priority(
        self, as_of: date, priority: EventPriority
    ) -> Event | None:
        """Return the next event of a specific priority on or after *as_of*."""
        for entry in self.entries:
            if entry.event_date >= as_of and entry.priority == priority:
                return entry
        return None

    def target_event(self, as_of: date) -> Event | None:
        """Next A event, falling back to the next event of any priority."""
        return self.next_event_by_priority(as_of, EventPriority.A) or self.next_event(
            as_of
        )

    def event_on_date(self, on_date: date) -> Event | None:
        """Return the highest-priority event on *on_date*, or None."""
        same_day = [e for e in self.entries if e.event_date == on_date]
        if not same_day:
            return None
        return min(same_day, key=lambda e: e.priority)
