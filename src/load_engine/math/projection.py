"""Forward projection of the PMC across a planned horizon.

Walks forward one calendar day at a time from the latest persisted
DailyLoad, feeding the planned TSS of each day into the same recurrence
used for actual history. Nothing here is cached or persisted: the series
reflects "what-if" planned load and is recomputed on every request.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from load_engine.math.training_load import step_load
from load_engine.models.daily_load import DailyLoad
from load_engine.models.enums import (
    RACE_TSB_OPTIMAL_HIGH,
    RACE_TSB_OPTIMAL_LOW,
    DayStatus,
    FormStatus,
)
from load_engine.models.event import Event, EventCalendar
from load_engine.models.plan import PlanDay
from load_engine.models.projection import (
    EventFormSummary,
    ProjectedFitness,
    ProjectionSummary,
)


def planned_load_for_day(day: PlanDay) -> float:
    """TSS a plan day contributes to the projection.

    Completed days use the athlete's actual TSS when reported; skipped and
    rescheduled-away days contribute nothing.
    """
    if day.status in (DayStatus.SKIPPED, DayStatus.RESCHEDULED):
        return 0.0
    if day.status == DayStatus.COMPLETED and day.actual_tss is not None:
        return float(day.actual_tss)
    return float(day.target_tss or 0.0)


def project_forward(
    current: DailyLoad | None,
    plan_days: Iterable[PlanDay],
    events: Iterable[Event] | EventCalendar,
    horizon_days: int,
    start: date | None = None,
) -> list[ProjectedFitness]:
    """Simulate CTL/ATL/TSB over the next *horizon_days* days.

    Args:
        current: Most recent persisted DailyLoad. None means no history:
            the walk starts from zero load on *start*.
        plan_days: Plan days covering the horizon. Days without a plan
            entry get T = 0; several entries on one date are summed.
        events: Events to flag on the series.
        horizon_days: Number of days to project (typically 42-84).
        start: First projected day. Defaults to ``current.day + 1``.

    Returns:
        One ProjectedFitness per day, oldest first. Empty when the horizon
        is not positive or there is no starting point.
    """
    if horizon_days <= 0:
        return []
    if start is None:
        if current is None:
            return []
        start = current.day + timedelta(days=1)

    ctl, atl = (current.ctl, current.atl) if current is not None else (0.0, 0.0)

    load_by_date: dict[date, float] = {}
    completed_dates: set[date] = set()
    skipped_dates: set[date] = set()
    for day in plan_days:
        if not day.in_forward_series:
            continue
        load_by_date[day.day] = load_by_date.get(day.day, 0.0) + planned_load_for_day(
            day
        )
        if day.completed:
            completed_dates.add(day.day)
        elif day.skipped:
            skipped_dates.add(day.day)

    calendar = (
        events if isinstance(events, EventCalendar) else EventCalendar.from_entries(*events)
    )

    projections: list[ProjectedFitness] = []
    for offset in range(horizon_days):
        day = start + timedelta(days=offset)
        tss = load_by_date.get(day, 0.0)
        ctl, atl = step_load(ctl, atl, tss)
        event = calendar.event_on_date(day)
        projections.append(
            ProjectedFitness(
                day=day,
                projected_ctl=ctl,
                projected_atl=atl,
                planned_tss=tss,
                is_event_day=event is not None,
                event_name=event.name if event else None,
                event_priority=event.priority if event else None,
                is_completed=day in completed_dates,
                is_skipped=day in skipped_dates,
            )
        )
    return projections


def race_form_status(tsb: float) -> FormStatus:
    """Classify event-day TSB: optimal between 5 and 25 inclusive."""
    if RACE_TSB_OPTIMAL_LOW <= tsb <= RACE_TSB_OPTIMAL_HIGH:
        return FormStatus.OPTIMAL
    if tsb < RACE_TSB_OPTIMAL_LOW:
        return FormStatus.LOW
    return FormStatus.HIGH


def projected_on(
    projections: Sequence[ProjectedFitness], on_date: date
) -> ProjectedFitness | None:
    for p in projections:
        if p.day == on_date:
            return p
    return None


def event_day_projections(
    projections: Sequence[ProjectedFitness],
) -> list[ProjectedFitness]:
    return [p for p in projections if p.is_event_day]


def projection_summary(projections: Sequence[ProjectedFitness]) -> ProjectionSummary:
    """Peak and end CTL, planned load totals and per-event form."""
    if not projections:
        return ProjectionSummary()

    peak = max(projections, key=lambda p: p.projected_ctl)
    total_tss = sum(p.planned_tss for p in projections)
    events = tuple(
        EventFormSummary(
            day=p.day,
            name=p.event_name or "",
            tsb=round(p.projected_tsb, 1),
            status=race_form_status(p.projected_tsb),
        )
        for p in projections
        if p.is_event_day
    )
    return ProjectionSummary(
        peak_ctl=round(peak.projected_ctl, 1),
        peak_ctl_date=peak.day,
        end_ctl=round(projections[-1].projected_ctl, 1),
        total_tss=total_tss,
        average_tss=round(total_tss / len(projections), 1),
        event_summaries=events,
    )
