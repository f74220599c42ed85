"""Training plan models: TrainingPlan, PlanDay and the lifecycle actions.

Plan days are mutated only through one of the tagged actions
(``Complete``, ``Skip``, ``Reschedule``, ``Annotate``) so that illegal
combinations such as completed-and-skipped cannot be expressed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Union

from load_engine.models.enums import (
    DayStatus,
    PlanGoal,
    PlanStatus,
    TrainingPhase,
    WorkoutCategory,
)
from load_engine.models.workout import PersonalisedInterval


@dataclass(frozen=True)
class TrainingPlan:
    """A multi-week plan belonging to one athlete.

    At most one plan per athlete is ACTIVE at a time; the lifecycle engine
    enforces this during activation.
    """

    plan_id: str
    athlete_id: str
    name: str
    goal: PlanGoal
    template_id: str
    start_date: date
    end_date: date
    duration_weeks: int
    status: PlanStatus = PlanStatus.DRAFT
    progress_percent: int = 0
    weekly_hours_target: float | None = None
    target_event_date: date | None = None
    description: str = ""


@dataclass(frozen=True)
class PlanWeek:
    """Weekly outline of a generated plan.

    ``target_tss`` is the baseline weekly TSS scaled by the week's
    progression multiplier; ``target_tss_range`` is the acceptable band
    as absolute TSS.
    """

    week_number: int
    start_date: date
    phase: TrainingPhase
    focus: str
    target_tss: float
    target_tss_range: tuple[int, int]


@dataclass(frozen=True)
class PlanDay:
    """One calendar day of a TrainingPlan.

    Rest days carry ``target_tss == 0`` and no workout reference.
    """

    day_id: str
    plan_id: str
    day: date
    week_number: int
    target_tss: float | None = None
    workout_template_ref: str | None = None
    workout_name: str | None = None
    category: WorkoutCategory | None = None
    target_duration_minutes: float | None = None
    target_if: float | None = None
    intervals: tuple[PersonalisedInterval, ...] = field(default_factory=tuple)
    is_key_workout: bool = False
    week_focus: str = ""
    status: DayStatus = DayStatus.SCHEDULED
    actual_tss: float | None = None
    actual_duration_minutes: float | None = None
    athlete_notes: str | None = None
    compliance_score: float | None = None
    rescheduled_to: date | None = None
    rescheduled_from: date | None = None

    @property
    def completed(self) -> bool:
        return self.status == DayStatus.COMPLETED

    @property
    def skipped(self) -> bool:
        return self.status == DayStatus.SKIPPED

    @property
    def is_rest_day(self) -> bool:
        return not self.target_tss and self.workout_template_ref is None

    @property
    def in_forward_series(self) -> bool:
        """False once the day has been rescheduled away."""
        return self.status != DayStatus.RESCHEDULED

    @property
    def counts_toward_progress(self) -> bool:
        """Training days still in the plan's series.

        Skipped days remain in the denominator; rest days and
        rescheduled-away days do not.
        """
        return self.in_forward_series and not self.is_rest_day


# ---------------------------------------------------------------------------
# Lifecycle actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Complete:
    """Mark a day done with the athlete's actual numbers (one or both)."""

    actual_tss: float | None = None
    actual_duration_minutes: float | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Skip:
    """Mark a day as intentionally not done."""

    notes: str | None = None


@dataclass(frozen=True)
class Reschedule:
    """Move a day's workout to ``new_date``."""

    new_date: date


@dataclass(frozen=True)
class Annotate:
    """Attach athlete notes without changing the day's state."""

    notes: str


DayAction = Union[Complete, Skip, Reschedule, Annotate]


@dataclass(frozen=True)
class PlanProgress:
    """Breakdown behind a plan's ``progress_percent``."""

    completed: int = 0
    skipped: int = 0
    rescheduled: int = 0
    remaining: int = 0
    counted: int = 0

    @property
    def percent(self) -> int:
        if self.counted == 0:
            return 0
        return round(100 * self.completed / self.counted)
