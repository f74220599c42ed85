"""Forward-projection output models. Derived on demand, never persisted."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from load_engine.models.enums import EventPriority, FormStatus


@dataclass(frozen=True)
class ProjectedFitness:
    """Projected PMC state at the end of one future day."""

    day: date
    projected_ctl: float
    projected_atl: float
    planned_tss: float = 0.0
    is_event_day: bool = False
    event_name: str | None = None
    event_priority: EventPriority | None = None
    is_completed: bool = False
    is_skipped: bool = False

    @property
    def projected_tsb(self) -> float:
        return self.projected_ctl - self.projected_atl


@dataclass(frozen=True)
class EventFormSummary:
    """Projected form on one event day."""

    day: date
    name: str
    tsb: float
    status: FormStatus


@dataclass(frozen=True)
class ProjectionSummary:
    """Headline numbers of a projected series."""

    peak_ctl: float = 0.0
    peak_ctl_date: date | None = None
    end_ctl: float = 0.0
    total_tss: float = 0.0
    average_tss: float = 0.0
    event_summaries: tuple[EventFormSummary, ...] = field(default_factory=tuple)
