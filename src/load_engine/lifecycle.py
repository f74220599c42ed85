"""Plan-day lifecycle, compliance scoring, progress and plan activation.

Plan day state machine::

    scheduled -> completed      (terminal)
    scheduled -> skipped        (terminal)
    scheduled -> rescheduled    (+ a new scheduled day on the target date)

Annotating is allowed in every state. Each transition is followed by a
progress recompute for the owning plan; a failed recompute is logged and
does not undo the transition.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from load_engine.models.enums import COMPLIANCE_CAP, DayStatus, PlanStatus
from load_engine.models.plan import (
    Annotate,
    Complete,
    DayAction,
    PlanDay,
    PlanProgress,
    Reschedule,
    Skip,
    TrainingPlan,
)
from load_store.exceptions import InvalidTransitionError, StoreError
from load_store.repository import TrainingRepository

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------


def compliance_score(
    actual_tss: float | None, target_tss: float | None
) -> float | None:
    """actual / target capped at 1.5; None when either side is missing or target is 0."""
    if actual_tss is None or not target_tss or target_tss <= 0:
        return None
    return min(max(actual_tss, 0.0) / target_tss, COMPLIANCE_CAP)


def _require_scheduled(day: PlanDay, verb: str) -> None:
    if day.status != DayStatus.SCHEDULED:
        raise InvalidTransitionError(
            f"Cannot {verb} plan day {day.day_id}: status is {day.status.value}",
            current_status=day.status.value,
        )


def complete_day(day: PlanDay, action: Complete) -> PlanDay:
    """Mark a scheduled day completed with the athlete's actuals.

    Raises:
        ValueError: If neither actual is given or either is negative.
        InvalidTransitionError: If the day is not scheduled.
    """
    if action.actual_tss is None and action.actual_duration_minutes is None:
        raise ValueError("Completing a day requires actual_tss or actual_duration_minutes")
    if action.actual_tss is not None and action.actual_tss < 0:
        raise ValueError(f"actual_tss must be non-negative, got {action.actual_tss}")
    if action.actual_duration_minutes is not None and action.actual_duration_minutes < 0:
        raise ValueError(
            "actual_duration_minutes must be non-negative, "
            f"got {action.actual_duration_minutes}"
        )
    _require_scheduled(day, "complete")
    return dataclasses.replace(
        day,
        status=DayStatus.COMPLETED,
        actual_tss=action.actual_tss,
        actual_duration_minutes=action.actual_duration_minutes,
        athlete_notes=action.notes if action.notes is not None else day.athlete_notes,
        compliance_score=compliance_score(action.actual_tss, day.target_tss),
    )


def skip_day(day: PlanDay, action: Skip) -> PlanDay:
    _require_scheduled(day, "skip")
    return dataclasses.replace(
        day,
        status=DayStatus.SKIPPED,
        athlete_notes=action.notes if action.notes is not None else day.athlete_notes,
    )


def reschedule_day(day: PlanDay, action: Reschedule) -> tuple[PlanDay, PlanDay]:
    """Move a scheduled day's workout to ``action.new_date``.

    Returns:
        (original marked RESCHEDULED, new SCHEDULED day on the new date).
    """
    if action.new_date == day.day:
        raise ValueError(f"Plan day {day.day_id} is already on {day.day.isoformat()}")
    _require_scheduled(day, "reschedule")
    moved = dataclasses.replace(
        day,
        day_id=f"{day.day_id}>{action.new_date.isoformat()}",
        day=action.new_date,
        status=DayStatus.SCHEDULED,
        actual_tss=None,
        actual_duration_minutes=None,
        compliance_score=None,
        rescheduled_to=None,
        rescheduled_from=day.day,
    )
    original = dataclasses.replace(
        day, status=DayStatus.RESCHEDULED, rescheduled_to=action.new_date
    )
    return original, moved


def annotate_day(day: PlanDay, action: Annotate) -> PlanDay:
    return dataclasses.replace(day, athlete_notes=action.notes)


def apply_action(day: PlanDay, action: DayAction) -> tuple[PlanDay, ...]:
    """Apply one lifecycle action; returns every day the action touched."""
    if isinstance(action, Complete):
        return (complete_day(day, action),)
    if isinstance(action, Skip):
        return (skip_day(day, action),)
    if isinstance(action, Reschedule):
        return reschedule_day(day, action)
    if isinstance(action, Annotate):
        return (annotate_day(day, action),)
    raise TypeError(f"Unknown plan day action: {action!r}")


def plan_progress(days: Iterable[PlanDay]) -> PlanProgress:
    """Progress over training days still in the plan's series.

    Rest days never count. Skipped days stay in the denominator;
    rescheduled-away days leave it (their replacement counts instead).
    """
    completed = skipped = rescheduled = remaining = counted = 0
    for day in days:
        if day.status == DayStatus.RESCHEDULED:
            rescheduled += 1
            continue
        if not day.counts_toward_progress:
            continue
        counted += 1
        if day.status == DayStatus.COMPLETED:
            completed += 1
        elif day.status == DayStatus.SKIPPED:
            skipped += 1
        else:
            remaining += 1
    return PlanProgress(
        completed=completed,
        skipped=skipped,
        rescheduled=rescheduled,
        remaining=remaining,
        counted=counted,
    )


# ---------------------------------------------------------------------------
# Repository-backed engine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActivationResult:
    """Outcome of the two-step activation sequence.

    Step 1 abandons every other active plan of the athlete; step 2 marks
    the requested plan active. A failed step is recorded in ``errors``;
    re-running activation is safe.
    """

    plan_id: str
    abandoned_plan_ids: tuple[str, ...] = ()
    failed_plan_ids: tuple[str, ...] = ()
    activated: bool = False
    already_active: bool = False
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def succeeded(self) -> bool:
        return self.activated and not self.failed_plan_ids


class PlanLifecycleEngine:
    """Applies lifecycle actions to stored plan days and plans.

    Usage:
        lifecycle = PlanLifecycleEngine(repository)
        day = lifecycle.complete_day(day_id, actual_tss=85)
        result = lifecycle.activate_plan(plan_id)
    """

    def __init__(self, repository: TrainingRepository) -> None:
        self.repository = repository

    # -- Plan days ----------------------------------------------------------

    def apply(self, day_id: str, action: DayAction) -> tuple[PlanDay, ...]:
        """Load, transition and store a plan day, then refresh plan progress.

        Raises:
            NotFoundError: If the day does not exist (nothing is written).
            InvalidTransitionError: If the day's state forbids the action.
        """
        day = self.repository.get_plan_day(day_id)
        changed = apply_action(day, action)
        self.repository.save_plan_days(changed)
        logger.info(
            "Plan day %s: %s -> %s",
            day_id,
            type(action).__name__,
            ", ".join(f"{d.day_id}={d.status.value}" for d in changed),
        )
        try:
            self.recompute_plan_progress(day.plan_id)
        except StoreError:
            logger.exception(
                "Progress recompute failed for plan %s after %s on %s",
                day.plan_id,
                type(action).__name__,
                day_id,
            )
        return changed

    def complete_day(
        self,
        day_id: str,
        actual_tss: float | None = None,
        actual_duration_minutes: float | None = None,
        notes: str | None = None,
    ) -> PlanDay:
        (day,) = self.apply(
            day_id,
            Complete(
                actual_tss=actual_tss,
                actual_duration_minutes=actual_duration_minutes,
                notes=notes,
            ),
        )
        return day

    def skip_day(self, day_id: str, notes: str | None = None) -> PlanDay:
        (day,) = self.apply(day_id, Skip(notes=notes))
        return day

    def reschedule_day(self, day_id: str, new_date: date) -> tuple[PlanDay, PlanDay]:
        original, moved = self.apply(day_id, Reschedule(new_date=new_date))
        return original, moved

    def annotate_day(self, day_id: str, notes: str) -> PlanDay:
        (day,) = self.apply(day_id, Annotate(notes=notes))
        return day

    # -- Progress -----------------------------------------------------------

    def plan_progress(self, plan_id: str) -> PlanProgress:
        self.repository.get_plan(plan_id)
        return plan_progress(self.repository.plan_days(plan_id))

    def recompute_plan_progress(self, plan_id: str) -> int:
        """Recount progress and write it onto the plan. Returns the percent."""
        plan = self.repository.get_plan(plan_id)
        percent = plan_progress(self.repository.plan_days(plan_id)).percent
        if percent != plan.progress_percent:
            self.repository.save_plan(dataclasses.replace(plan, progress_percent=percent))
        return percent

    # -- Plans --------------------------------------------------------------

    def activate_plan(self, plan_id: str) -> ActivationResult:
        """Make *plan_id* the athlete's single active plan.

        Raises:
            NotFoundError: If the plan does not exist.
            InvalidTransitionError: If the plan is abandoned or completed.
        """
        plan = self.repository.get_plan(plan_id)
        if plan.status in (PlanStatus.ABANDONED, PlanStatus.COMPLETED):
            raise InvalidTransitionError(
                f"Cannot activate plan {plan_id}: status is {plan.status.value}",
                current_status=plan.status.value,
            )

        abandoned: list[str] = []
        failed: list[str] = []
        errors: list[str] = []
        for other in self.repository.active_plans(plan.athlete_id):
            if other.plan_id == plan_id:
                continue
            try:
                self.repository.save_plan(
                    dataclasses.replace(other, status=PlanStatus.ABANDONED)
                )
            except StoreError as exc:
                logger.warning("Could not abandon plan %s: %s", other.plan_id, exc)
                failed.append(other.plan_id)
                errors.append(f"abandon {other.plan_id}: {exc}")
            else:
                logger.info("Abandoned plan %s", other.plan_id)
                abandoned.append(other.plan_id)

        if failed:
            return ActivationResult(
                plan_id=plan_id,
                abandoned_plan_ids=tuple(abandoned),
                failed_plan_ids=tuple(failed),
                activated=plan.status == PlanStatus.ACTIVE,
                already_active=plan.status == PlanStatus.ACTIVE,
                errors=tuple(errors),
            )

        if plan.status == PlanStatus.ACTIVE:
            return ActivationResult(
                plan_id=plan_id,
                abandoned_plan_ids=tuple(abandoned),
                activated=True,
                already_active=True,
            )

        try:
            self.repository.save_plan(dataclasses.replace(plan, status=PlanStatus.ACTIVE))
        except StoreError as exc:
            logger.warning("Could not activate plan %s: %s", plan_id, exc)
            return ActivationResult(
                plan_id=plan_id,
                abandoned_plan_ids=tuple(abandoned),
                errors=(f"activate {plan_id}: {exc}",),
            )
        logger.info("Activated plan %s for athlete %s", plan_id, plan.athlete_id)
        return ActivationResult(
            plan_id=plan_id, abandoned_plan_ids=tuple(abandoned), activated=True
        )

    def complete_plan(self, plan_id: str) -> TrainingPlan:
        """ACTIVE -> COMPLETED. Completing a completed plan is a no-op."""
        return self._set_plan_status(
            plan_id, PlanStatus.COMPLETED, allowed_from=(PlanStatus.ACTIVE,)
        )

    def abandon_plan(self, plan_id: str) -> TrainingPlan:
        """DRAFT or ACTIVE -> ABANDONED. Abandoning twice is a no-op."""
        return self._set_plan_status(
            plan_id,
            PlanStatus.ABANDONED,
            allowed_from=(PlanStatus.DRAFT, PlanStatus.ACTIVE),
        )

    def _set_plan_status(
        self,
        plan_id: str,
        status: PlanStatus,
        allowed_from: tuple[PlanStatus, ...],
    ) -> TrainingPlan:
        plan = self.repository.get_plan(plan_id)
        if plan.status == status:
            return plan
        if plan.status not in allowed_from:
            raise InvalidTransitionError(
                f"Cannot move plan {plan_id} from {plan.status.value} to {status.value}",
                current_status=plan.status.value,
            )
        updated = dataclasses.replace(plan, status=status)
        self.repository.save_plan(updated)
        logger.info("Plan %s: %s -> %s", plan_id, plan.status.value, status.value)
        return updated
