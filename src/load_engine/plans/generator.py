"""Template selection and deterministic plan expansion.

A plan is a pure function of (template, start date, athlete context): the
same inputs always produce the same plan id, day ids, workouts and targets.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from load_engine.models.enums import (
    BASE_BUILD_CTL_CEILING,
    BASE_BUILD_MAX_WEEKS_OUT,
    BASE_BUILD_MIN_WEEKS_OUT,
    DAYS_PER_WEEK,
    DEFAULT_KEY_WORKOUT_DAYS,
    DEFAULT_WEEKLY_HOURS,
    EVENT_PREP_MIN_WEEKS_OUT,
    TAPER_MAX_WEEKS_OUT,
    TSS_PER_HOUR_MIXED,
    PlanStatus,
    TemplateId,
)
from load_engine.models.plan import PlanDay, PlanWeek, TrainingPlan
from load_engine.plans.library import select_workout
from load_engine.plans.templates import KeyWorkoutSlot, PlanTemplate, get_template


@dataclass(frozen=True)
class PlanContext:
    """Athlete inputs that shape a generated plan.

    Attributes:
        ctl: Current chronic training load; sets the baseline weekly TSS.
        ftp: FTP used to personalise interval watts. None leaves
            intervals unresolved.
        key_workout_days: ``date.weekday()`` values that carry key
            sessions, in slot order.
    """

    athlete_id: str = "athlete"
    ctl: float = 0.0
    ftp: int | None = None
    weekly_hours: float | None = None
    key_workout_days: tuple[int, ...] = DEFAULT_KEY_WORKOUT_DAYS
    target_event_date: date | None = None


def weeks_until(start: date, event_date: date) -> int:
    """Whole weeks from *start* to *event_date*, rounded up. Never negative."""
    days = (event_date - start).days
    if days <= 0:
        return 0
    return math.ceil(days / DAYS_PER_WEEK)


def select_template(weeks_until_event: int, current_ctl: float) -> TemplateId:
    """Choose a template from the time to the target event and current CTL.

    Rules are ordered; the first match wins:

    ==============  ===========  ==================
    weeks until     current CTL  template
    ==============  ===========  ==================
    <= 4            any          3-week taper
    >= 10           any          12-week event prep
    6-9             < 50         4-week base build
    otherwise       any          8-week FTP build
    ==============  ===========  ==================
    """
    if weeks_until_event <= TAPER_MAX_WEEKS_OUT:
        return TemplateId.TAPER_3WEEK
    if weeks_until_event >= EVENT_PREP_MIN_WEEKS_OUT:
        return TemplateId.EVENT_PREP_12WEEK
    if (
        BASE_BUILD_MIN_WEEKS_OUT <= weeks_until_event <= BASE_BUILD_MAX_WEEKS_OUT
        and current_ctl < BASE_BUILD_CTL_CEILING
    ):
        return TemplateId.BASE_BUILD_4WEEK
    return TemplateId.FTP_BUILD_8WEEK


def baseline_weekly_tss(ctl: float, weekly_hours: float | None = None) -> int:
    """Blend of current CTL (as a weekly load) and available hours."""
    hours = weekly_hours if weekly_hours is not None else DEFAULT_WEEKLY_HOURS
    from_ctl = max(ctl, 0.0) * DAYS_PER_WEEK
    from_hours = max(hours, 0.0) * TSS_PER_HOUR_MIXED
    return round((from_ctl + from_hours) / 2)


def plan_id_for(athlete_id: str, template_id: TemplateId, start_date: date) -> str:
    return f"{athlete_id}-{template_id.value}-{start_date.isoformat()}"


def day_id_for(plan_id: str, day: date) -> str:
    return f"{plan_id}:{day.isoformat()}"


def _key_day_slots(
    week_start: date, key_workout_days: Sequence[int]
) -> dict[date, int]:
    """Map each key day in a 7-day window to its slot index.

    Slots follow the order of *key_workout_days*, not the calendar order
    within the window.
    """
    window = [week_start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]
    by_weekday = {d.weekday(): d for d in window}
    slots: dict[date, int] = {}
    for index, weekday in enumerate(dict.fromkeys(key_workout_days)):
        day = by_weekday.get(weekday)
        if day is not None:
            slots[day] = index
    return slots


def _key_plan_day(
    plan_id: str,
    day: date,
    week_number: int,
    week_focus: str,
    week_tss: float,
    slot: KeyWorkoutSlot,
    ftp: int | None,
) -> PlanDay:
    target_tss = round(week_tss * slot.tss_share_pct / 100)
    workout = select_workout(slot.category, target_tss, slot.preferred_ids)
    if workout is None:
        return PlanDay(
            day_id=day_id_for(plan_id, day),
            plan_id=plan_id,
            day=day,
            week_number=week_number,
            target_tss=target_tss,
            category=slot.category,
            is_key_workout=True,
            week_focus=week_focus,
        )
    return PlanDay(
        day_id=day_id_for(plan_id, day),
        plan_id=plan_id,
        day=day,
        week_number=week_number,
        target_tss=target_tss,
        workout_template_ref=workout.workout_id,
        workout_name=workout.name,
        category=workout.category,
        target_duration_minutes=workout.duration_minutes,
        target_if=workout.target_if,
        intervals=workout.personalise(ftp),
        is_key_workout=True,
        week_focus=week_focus,
    )


def plan_weeks(
    template_id: TemplateId | str,
    start_date: date,
    context: PlanContext | None = None,
) -> list[PlanWeek]:
    """Weekly outline of the plan ``generate_plan`` would produce.

    Raises:
        ValueError: If the template id is unknown.
    """
    context = context or PlanContext()
    template = get_template(template_id)
    baseline = baseline_weekly_tss(context.ctl, context.weekly_hours)
    weeks: list[PlanWeek] = []
    for week_index, week in enumerate(template.weeks):
        low_pct, high_pct = week.target_tss_range_pct
        weeks.append(
            PlanWeek(
                week_number=week.week_number,
                start_date=start_date + timedelta(days=week_index * DAYS_PER_WEEK),
                phase=week.phase,
                focus=week.focus,
                target_tss=baseline * template.multiplier_for_week(week_index),
                target_tss_range=(
                    round(baseline * low_pct / 100),
                    round(baseline * high_pct / 100),
                ),
            )
        )
    return weeks


def generate_plan(
    template_id: TemplateId | str,
    start_date: date,
    context: PlanContext | None = None,
) -> tuple[TrainingPlan, list[PlanDay]]:
    """Expand a template into a draft plan and one PlanDay per calendar day.

    Week N covers ``start_date + 7(N-1)`` through the following six days.
    Key day i of a week (in ``key_workout_days`` order) takes the week's
    i-th key-workout slot; other days are rest days with ``target_tss == 0``.

    Args:
        template_id: Template to expand.
        start_date: First day of the plan.
        context: Athlete inputs. Defaults to a cold-start athlete.

    Returns:
        (TrainingPlan in DRAFT status, plan days ordered by date).

    Raises:
        ValueError: If the template id is unknown.
    """
    context = context or PlanContext()
    template: PlanTemplate = get_template(template_id)
    plan_id = plan_id_for(context.athlete_id, template.template_id, start_date)

    days: list[PlanDay] = []
    outline = plan_weeks(template.template_id, start_date, context)
    for week, plan_week in zip(template.weeks, outline):
        slots = _key_day_slots(plan_week.start_date, context.key_workout_days)
        for offset in range(DAYS_PER_WEEK):
            day = plan_week.start_date + timedelta(days=offset)
            slot_index = slots.get(day)
            if slot_index is not None and slot_index < len(week.key_workouts):
                days.append(
                    _key_plan_day(
                        plan_id,
                        day,
                        week.week_number,
                        week.focus,
                        plan_week.target_tss,
                        week.key_workouts[slot_index],
                        context.ftp,
                    )
                )
            else:
                days.append(
                    PlanDay(
                        day_id=day_id_for(plan_id, day),
                        plan_id=plan_id,
                        day=day,
                        week_number=week.week_number,
                        target_tss=0,
                        week_focus=week.focus,
                    )
                )

    end_date = start_date + timedelta(days=template.duration_weeks * DAYS_PER_WEEK - 1)
    plan = TrainingPlan(
        plan_id=plan_id,
        athlete_id=context.athlete_id,
        name=template.name,
        goal=template.goal,
        template_id=template.template_id.value,
        start_date=start_date,
        end_date=end_date,
        duration_weeks=template.duration_weeks,
        status=PlanStatus.DRAFT,
        weekly_hours_target=context.weekly_hours,
        target_event_date=context.target_event_date,
        description=template.description,
    )
    return plan, days
