"""Periodization templates: multi-week structures the generator expands.

Each week lists its key-workout slots in order; slot N lands on the N-th
key day of the week. Weekly load is the athlete's baseline weekly TSS times
the week's progression multiplier, and each slot takes a fixed share of it.
"""

from __future__ import annotations

from dataclasses import dataclass

from load_engine.models.enums import (
    PlanGoal,
    TemplateId,
    TrainingPhase,
    WorkoutCategory,
)

_C = WorkoutCategory
_P = TrainingPhase


@dataclass(frozen=True)
class KeyWorkoutSlot:
    """One key session within a template week.

    Attributes:
        category: Workout category used when no preferred id resolves.
        preferred_ids: Library workout ids, most preferred first.
        tss_share_pct: Share of the week's target TSS given to this slot.
    """

    category: WorkoutCategory
    preferred_ids: tuple[str, ...]
    tss_share_pct: float


@dataclass(frozen=True)
class WeekTemplate:
    week_number: int
    phase: TrainingPhase
    focus: str
    key_workouts: tuple[KeyWorkoutSlot, ...]
    target_tss_range_pct: tuple[int, int] = (90, 110)


@dataclass(frozen=True)
class PlanTemplate:
    """A complete periodization template.

    ``weekly_tss_progression`` holds one multiplier per week
    (1.0 = baseline weekly TSS).
    """

    template_id: TemplateId
    name: str
    goal: PlanGoal
    description: str
    duration_weeks: int
    min_ctl: float
    weeks: tuple[WeekTemplate, ...]
    weekly_tss_progression: tuple[float, ...]
    max_ctl: float | None = None

    def multiplier_for_week(self, week_index: int) -> float:
        if 0 <= week_index < len(self.weekly_tss_progression):
            return self.weekly_tss_progression[week_index]
        return 1.0


def _slot(category: WorkoutCategory, ids: str, share: float) -> KeyWorkoutSlot:
    return KeyWorkoutSlot(
        category=category,
        preferred_ids=tuple(ids.split()),
        tss_share_pct=share,
    )


# Recovery weeks are shared by the base, build and event-prep templates.
def _recovery_week(number: int, focus: str, tss_range: tuple[int, int] = (60, 70)) -> WeekTemplate:
    return WeekTemplate(
        week_number=number,
        phase=_P.RECOVERY,
        focus=focus,
        target_tss_range_pct=tss_range,
        key_workouts=(
            _slot(_C.ENDURANCE, "endurance_zone2_60", 30),
            _slot(_C.RECOVERY, "recovery_easy_spin recovery_openers", 20),
            _slot(_C.ENDURANCE, "endurance_zone2_90", 35),
        ),
    )


BASE_BUILD_4WEEK = PlanTemplate(
    template_id=TemplateId.BASE_BUILD_4WEEK,
    name="4-Week Base Building",
    goal=PlanGoal.BASE_BUILD,
    description=(
        "Aerobic foundation through Zone 2 volume with a progressive "
        "increase in load and a closing recovery week."
    ),
    duration_weeks=4,
    min_ctl=20,
    max_ctl=60,
    weeks=(
        WeekTemplate(1, _P.BASE, "Establish rhythm with one tempo touchpoint", (
            _slot(_C.ENDURANCE, "endurance_zone2_60 endurance_zone2_90", 25),
            _slot(_C.TEMPO, "tempo_3x10", 25),
            _slot(_C.ENDURANCE, "endurance_zone2_90 endurance_zone2_120", 35),
        ), (85, 95)),
        WeekTemplate(2, _P.BASE, "Build volume with longer endurance rides", (
            _slot(_C.ENDURANCE, "endurance_zone2_90", 25),
            _slot(_C.SWEETSPOT, "sweetspot_3x10", 28),
            _slot(_C.ENDURANCE, "endurance_zone2_120", 35),
        ), (95, 105)),
        WeekTemplate(3, _P.BASE, "Peak volume week", (
            _slot(_C.ENDURANCE, "endurance_zone2_90 endurance_progressive", 25),
            _slot(_C.SWEETSPOT, "sweetspot_2x20", 28),
            _slot(_C.ENDURANCE, "endurance_zone2_120 endurance_zone2_180", 35),
        ), (105, 115)),
        _recovery_week(4, "Recovery week - absorb adaptations"),
    ),
    weekly_tss_progression=(1.0, 1.1, 1.2, 0.65),
)

FTP_BUILD_8WEEK = PlanTemplate(
    template_id=TemplateId.FTP_BUILD_8WEEK,
    name="8-Week FTP Builder",
    goal=PlanGoal.FTP_BUILD,
    description=(
        "Two 3-week blocks of sweet spot then threshold work, each closed "
        "by a recovery week."
    ),
    duration_weeks=8,
    min_ctl=40,
    weeks=(
        WeekTemplate(1, _P.BUILD, "Sweet spot introduction", (
            _slot(_C.SWEETSPOT, "sweetspot_3x10", 28),
            _slot(_C.ENDURANCE, "endurance_zone2_90", 25),
            _slot(_C.SWEETSPOT, "sweetspot_2x20", 32),
        ), (90, 100)),
        WeekTemplate(2, _P.BUILD, "Build sweet spot volume", (
            _slot(_C.SWEETSPOT, "sweetspot_2x20", 30),
            _slot(_C.THRESHOLD, "threshold_3x8", 25),
            _slot(_C.SWEETSPOT, "sweetspot_3x15", 32),
        ), (100, 110)),
        WeekTemplate(3, _P.BUILD, "Peak sweet spot week", (
            _slot(_C.SWEETSPOT, "sweetspot_3x15 sweetspot_over_under", 30),
            _slot(_C.THRESHOLD, "threshold_3x10", 28),
            _slot(_C.SWEETSPOT, "sweetspot_2x30", 32),
        ), (110, 120)),
        _recovery_week(4, "Recovery week - absorb block 1"),
        WeekTemplate(5, _P.BUILD, "Begin threshold focus", (
            _slot(_C.THRESHOLD, "threshold_3x10", 28),
            _slot(_C.SWEETSPOT, "sweetspot_over_under", 25),
            _slot(_C.THRESHOLD, "threshold_2x20", 32),
        ), (95, 105)),
        WeekTemplate(6, _P.BUILD, "Build threshold volume", (
            _slot(_C.THRESHOLD, "threshold_2x20", 30),
            _slot(_C.VO2MAX, "vo2max_6x3", 25),
            _slot(_C.THRESHOLD, "threshold_3x15", 32),
        ), (105, 115)),
        WeekTemplate(7, _P.BUILD, "Peak threshold week", (
            _slot(_C.THRESHOLD, "threshold_3x15", 30),
            _slot(_C.VO2MAX, "vo2max_5x4 vo2max_5x5", 25),
            _slot(_C.THRESHOLD, "threshold_40min_tt", 32),
        ), (115, 125)),
        _recovery_week(8, "Final recovery - consolidate gains", (55, 65)),
    ),
    weekly_tss_progression=(1.0, 1.1, 1.2, 0.6, 1.0, 1.1, 1.2, 0.55),
)

TAPER_3WEEK = PlanTemplate(
    template_id=TemplateId.TAPER_3WEEK,
    name="3-Week Pre-Event Taper",
    goal=PlanGoal.TAPER,
    description=(
        "Progressive volume reduction that keeps intensity touchpoints, "
        "arriving fresh for the goal event."
    ),
    duration_weeks=3,
    min_ctl=50,
    weeks=(
        WeekTemplate(1, _P.TAPER, "Reduce volume, keep intensity", (
            _slot(_C.THRESHOLD, "threshold_3x8", 30),
            _slot(_C.ENDURANCE, "endurance_zone2_60", 22),
            _slot(_C.VO2MAX, "vo2max_6x3", 28),
        ), (70, 80)),
        WeekTemplate(2, _P.TAPER, "Deeper taper, intensity touchpoints only", (
            _slot(_C.SWEETSPOT, "sweetspot_3x10", 30),
            _slot(_C.RECOVERY, "recovery_easy_spin", 18),
            _slot(_C.THRESHOLD, "threshold_3x8", 28),
        ), (50, 60)),
        WeekTemplate(3, _P.PEAK, "Event week - openers and rest", (
            _slot(_C.RECOVERY, "recovery_openers", 35),
            _slot(_C.RECOVERY, "recovery_easy_spin recovery_flush", 25),
        ), (30, 40)),
    ),
    weekly_tss_progression=(0.75, 0.5, 0.3),
)

EVENT_PREP_12WEEK = PlanTemplate(
    template_id=TemplateId.EVENT_PREP_12WEEK,
    name="12-Week Event Preparation",
    goal=PlanGoal.EVENT_PREP,
    description=(
        "Full preparation cycle: base, build, peak and taper phases with "
        "increasing specificity toward the goal event."
    ),
    duration_weeks=12,
    min_ctl=35,
    weeks=(
        WeekTemplate(1, _P.BASE, "Establish base", (
            _slot(_C.ENDURANCE, "endurance_zone2_90", 28),
            _slot(_C.TEMPO, "tempo_3x10", 25),
            _slot(_C.ENDURANCE, "endurance_zone2_120", 35),
        ), (85, 95)),
        WeekTemplate(2, _P.BASE, "Build base volume", (
            _slot(_C.ENDURANCE, "endurance_zone2_90 endurance_progressive", 28),
            _slot(_C.SWEETSPOT, "sweetspot_3x10", 25),
            _slot(_C.ENDURANCE, "endurance_zone2_120", 35),
        ), (95, 105)),
        WeekTemplate(3, _P.BASE, "Peak base volume", (
            _slot(_C.ENDURANCE, "endurance_zone2_90", 25),
            _slot(_C.SWEETSPOT, "sweetspot_2x20", 28),
            _slot(_C.ENDURANCE, "endurance_zone2_180", 38),
        ), (105, 115)),
        _recovery_week(4, "Recovery week - absorb base"),
        WeekTemplate(5, _P.BUILD, "Introduce threshold", (
            _slot(_C.SWEETSPOT, "sweetspot_2x20", 28),
            _slot(_C.THRESHOLD, "threshold_3x8", 25),
            _slot(_C.ENDURANCE, "endurance_zone2_120", 32),
        ), (95, 105)),
        WeekTemplate(6, _P.BUILD, "Build intensity volume", (
            _slot(_C.THRESHOLD, "threshold_3x10", 28),
            _slot(_C.VO2MAX, "vo2max_6x3", 25),
            _slot(_C.SWEETSPOT, "sweetspot_3x15 sweetspot_over_under", 32),
        ), (105, 115)),
        WeekTemplate(7, _P.BUILD, "Peak build week", (
            _slot(_C.THRESHOLD, "threshold_2x20", 30),
            _slot(_C.VO2MAX, "vo2max_5x4", 25),
            _slot(_C.ENDURANCE, "endurance_zone2_120", 32),
        ), (115, 125)),
        _recovery_week(8, "Recovery week - absorb build"),
        WeekTemplate(9, _P.PEAK, "Event-specific intensity", (
            _slot(_C.VO2MAX, "vo2max_5x5", 28),
            _slot(_C.THRESHOLD, "threshold_2x20", 28),
            _slot(_C.ENDURANCE, "endurance_zone2_90", 30),
        ), (90, 100)),
        WeekTemplate(10, _P.PEAK, "Maintain sharpness", (
            _slot(_C.THRESHOLD, "threshold_3x10", 30),
            _slot(_C.ANAEROBIC, "anaerobic_30_30 anaerobic_1min", 22),
            _slot(_C.ENDURANCE, "endurance_zone2_60", 28),
        ), (80, 90)),
        WeekTemplate(11, _P.TAPER, "Begin taper", (
            _slot(_C.THRESHOLD, "threshold_3x8", 30),
            _slot(_C.RECOVERY, "recovery_easy_spin", 20),
            _slot(_C.VO2MAX, "vo2max_6x3", 28),
        ), (55, 65)),
        WeekTemplate(12, _P.PEAK, "Event week - openers and rest", (
            _slot(_C.RECOVERY, "recovery_openers", 35),
            _slot(_C.RECOVERY, "recovery_easy_spin recovery_flush", 25),
        ), (30, 40)),
    ),
    weekly_tss_progression=(1.0, 1.1, 1.2, 0.6, 1.0, 1.1, 1.2, 0.6, 0.95, 0.85, 0.55, 0.3),
)

MAINTENANCE_4WEEK = PlanTemplate(
    template_id=TemplateId.MAINTENANCE_4WEEK,
    name="4-Week Maintenance",
    goal=PlanGoal.MAINTENANCE,
    description="Hold current fitness between goal events with varied, balanced load.",
    duration_weeks=4,
    min_ctl=40,
    weeks=(
        WeekTemplate(1, _P.MAINTENANCE, "Balanced week", (
            _slot(_C.SWEETSPOT, "sweetspot_2x20", 28),
            _slot(_C.ENDURANCE, "endurance_zone2_90", 28),
            _slot(_C.THRESHOLD, "threshold_3x8", 28),
        ), (90, 100)),
        WeekTemplate(2, _P.MAINTENANCE, "VO2 focus week", (
            _slot(_C.VO2MAX, "vo2max_6x3 vo2max_5x4", 26),
            _slot(_C.ENDURANCE, "endurance_zone2_90", 28),
            _slot(_C.SWEETSPOT, "sweetspot_3x10", 28),
        ), (90, 100)),
        WeekTemplate(3, _P.MAINTENANCE, "Endurance focus week", (
            _slot(_C.ENDURANCE, "endurance_zone2_90 endurance_progressive", 28),
            _slot(_C.TEMPO, "tempo_2x20", 25),
            _slot(_C.ENDURANCE, "endurance_zone2_120", 35),
        ), (95, 105)),
        _recovery_week(4, "Easy week - reset"),
    ),
    weekly_tss_progression=(1.0, 1.0, 1.05, 0.65),
)

PLAN_TEMPLATES: dict[TemplateId, PlanTemplate] = {
    t.template_id: t
    for t in (
        BASE_BUILD_4WEEK,
        FTP_BUILD_8WEEK,
        TAPER_3WEEK,
        EVENT_PREP_12WEEK,
        MAINTENANCE_4WEEK,
    )
}


def get_template(template_id: TemplateId | str) -> PlanTemplate:
    """Look up a template by id.

    Raises:
        ValueError: If the id is unknown.
    """
    try:
        return PLAN_TEMPLATES[TemplateId(template_id)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown plan template: {template_id!r}") from None


def applicable_templates(current_ctl: float) -> list[PlanTemplate]:
    """Templates whose CTL window contains *current_ctl*."""
    return [
        t
        for t in PLAN_TEMPLATES.values()
        if current_ctl >= t.min_ctl and (t.max_ctl is None or current_ctl <= t.max_ctl)
    ]
