"""Structured workout library referenced by the plan templates.

Intensities are % of FTP. TSS and IF ranges describe a typical execution
of the session by a rider at their current FTP.
"""

from __future__ import annotations

from load_engine.models.enums import WorkoutCategory
from load_engine.models.workout import WorkoutInterval, WorkoutTemplate

_C = WorkoutCategory


def _iv(
    sets: int, work_s: int, rest_s: int, low: float, high: float, notes: str = ""
) -> WorkoutInterval:
    return WorkoutInterval(
        sets=sets,
        duration_seconds=work_s,
        rest_seconds=rest_s,
        intensity_min_pct=low,
        intensity_max_pct=high,
        notes=notes,
    )


WORKOUT_LIBRARY: tuple[WorkoutTemplate, ...] = (
    # -- Recovery ---------------------------------------------------------
    WorkoutTemplate(
        workout_id="recovery_easy_spin",
        name="Easy Recovery Spin",
        category=_C.RECOVERY,
        duration_minutes=45,
        tss_range=(15, 30),
        if_range=(0.50, 0.60),
        description="Very easy spin below 55% FTP with smooth, high-cadence pedalling.",
    ),
    WorkoutTemplate(
        workout_id="recovery_flush",
        name="Recovery Flush Ride",
        category=_C.RECOVERY,
        duration_minutes=30,
        tss_range=(10, 20),
        if_range=(0.45, 0.55),
        description="Short, very easy spin for the day after racing or very hard training.",
    ),
    WorkoutTemplate(
        workout_id="recovery_openers",
        name="Pre-Event Openers",
        category=_C.RECOVERY,
        duration_minutes=45,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(25, 40),
        if_range=(0.55, 0.70),
        description="Easy riding with a few short, sharp efforts to wake the legs before an event.",
        intervals=(_iv(3, 30, 180, 120, 150, "Short sharp efforts to activate legs"),),
    ),
    # -- Endurance --------------------------------------------------------
    WorkoutTemplate(
        workout_id="endurance_zone2_60",
        name="Zone 2 Foundation",
        category=_C.ENDURANCE,
        duration_minutes=60,
        tss_range=(40, 55),
        if_range=(0.65, 0.75),
        description="Steady Zone 2 riding at 56-75% FTP.",
    ),
    WorkoutTemplate(
        workout_id="endurance_zone2_90",
        name="Zone 2 Builder",
        category=_C.ENDURANCE,
        duration_minutes=90,
        tss_range=(55, 75),
        if_range=(0.65, 0.75),
        description="90 minutes of steady aerobic riding.",
    ),
    WorkoutTemplate(
        workout_id="endurance_zone2_120",
        name="Long Endurance Ride",
        category=_C.ENDURANCE,
        duration_minutes=120,
        tss_range=(75, 100),
        if_range=(0.65, 0.75),
        description="Two hours of Zone 2 with fuelling practice.",
    ),
    WorkoutTemplate(
        workout_id="endurance_zone2_180",
        name="Long Aerobic Builder",
        category=_C.ENDURANCE,
        duration_minutes=180,
        tss_range=(100, 140),
        if_range=(0.60, 0.72),
        description="Three-hour aerobic ride; keep the effort conversational.",
    ),
    WorkoutTemplate(
        workout_id="endurance_progressive",
        name="Progressive Endurance",
        category=_C.ENDURANCE,
        duration_minutes=90,
        tss_range=(60, 80),
        if_range=(0.68, 0.75),
        description="Endurance ride that builds from easy Zone 2 to low tempo.",
        intervals=(
            _iv(1, 1800, 0, 60, 65, "First 30 min - easy Zone 2"),
            _iv(1, 1800, 0, 68, 72, "Second 30 min - upper Zone 2"),
            _iv(1, 900, 0, 75, 80, "Last 15 min - low tempo"),
        ),
    ),
    # -- Tempo ------------------------------------------------------------
    WorkoutTemplate(
        workout_id="tempo_3x10",
        name="Tempo Intervals 3x10",
        category=_C.TEMPO,
        duration_minutes=60,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(55, 70),
        if_range=(0.75, 0.82),
        description="Three 10-minute tempo blocks with 5 minutes easy between.",
        intervals=(_iv(3, 600, 300, 76, 87),),
    ),
    WorkoutTemplate(
        workout_id="tempo_2x20",
        name="Tempo 2x20",
        category=_C.TEMPO,
        duration_minutes=70,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(60, 75),
        if_range=(0.78, 0.84),
        description="Two 20-minute tempo blocks.",
        intervals=(_iv(2, 1200, 600, 76, 87),),
    ),
    # -- Sweet spot -------------------------------------------------------
    WorkoutTemplate(
        workout_id="sweetspot_3x10",
        name="Sweet Spot 3x10",
        category=_C.SWEETSPOT,
        duration_minutes=60,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(60, 75),
        if_range=(0.82, 0.88),
        description="Three 10-minute sweet spot efforts at 88-93% FTP.",
        intervals=(_iv(3, 600, 300, 88, 93),),
    ),
    WorkoutTemplate(
        workout_id="sweetspot_2x20",
        name="Sweet Spot 2x20",
        category=_C.SWEETSPOT,
        duration_minutes=70,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(70, 85),
        if_range=(0.84, 0.89),
        description="Classic 2x20 minutes at sweet spot.",
        intervals=(_iv(2, 1200, 600, 88, 93),),
    ),
    WorkoutTemplate(
        workout_id="sweetspot_3x15",
        name="Sweet Spot 3x15",
        category=_C.SWEETSPOT,
        duration_minutes=75,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(75, 90),
        if_range=(0.85, 0.90),
        description="Three 15-minute sweet spot efforts.",
        intervals=(_iv(3, 900, 300, 88, 93),),
    ),
    WorkoutTemplate(
        workout_id="sweetspot_2x30",
        name="Sweet Spot 2x30",
        category=_C.SWEETSPOT,
        duration_minutes=90,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(85, 100),
        if_range=(0.85, 0.89),
        description="Two 30-minute sweet spot blocks for muscular endurance.",
        intervals=(_iv(2, 1800, 600, 88, 92),),
    ),
    WorkoutTemplate(
        workout_id="sweetspot_over_under",
        name="Sweet Spot Over-Unders",
        category=_C.SWEETSPOT,
        duration_minutes=75,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(75, 90),
        if_range=(0.85, 0.91),
        description="Alternate 2 min at 95% and 1 min at 85% FTP inside each block.",
        intervals=(_iv(3, 720, 360, 85, 95, "2 min at 95%, 1 min at 85%, repeat 4x"),),
    ),
    # -- Threshold --------------------------------------------------------
    WorkoutTemplate(
        workout_id="threshold_3x8",
        name="Threshold 3x8",
        category=_C.THRESHOLD,
        duration_minutes=60,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(65, 80),
        if_range=(0.86, 0.92),
        description="Three 8-minute efforts at threshold.",
        intervals=(_iv(3, 480, 360, 95, 100),),
    ),
    WorkoutTemplate(
        workout_id="threshold_3x10",
        name="Threshold 3x10",
        category=_C.THRESHOLD,
        duration_minutes=65,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(70, 85),
        if_range=(0.88, 0.93),
        description="Three 10-minute efforts at threshold.",
        intervals=(_iv(3, 600, 360, 95, 100),),
    ),
    WorkoutTemplate(
        workout_id="threshold_2x20",
        name="Threshold 2x20",
        category=_C.THRESHOLD,
        duration_minutes=70,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(80, 95),
        if_range=(0.90, 0.95),
        description="Two 20-minute efforts at 96-100% FTP.",
        intervals=(_iv(2, 1200, 600, 96, 100),),
    ),
    WorkoutTemplate(
        workout_id="threshold_3x15",
        name="Threshold 3x15",
        category=_C.THRESHOLD,
        duration_minutes=80,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(85, 100),
        if_range=(0.91, 0.96),
        description="Three 15-minute efforts at threshold.",
        intervals=(_iv(3, 900, 420, 96, 100),),
    ),
    WorkoutTemplate(
        workout_id="threshold_40min_tt",
        name="40-Minute Time Trial",
        category=_C.THRESHOLD,
        duration_minutes=70,
        warmup_minutes=20,
        cooldown_minutes=10,
        tss_range=(90, 105),
        if_range=(0.93, 0.98),
        description="Continuous 40-minute effort at threshold; doubles as an FTP check.",
        intervals=(_iv(1, 2400, 0, 95, 100),),
    ),
    # -- VO2max -----------------------------------------------------------
    WorkoutTemplate(
        workout_id="vo2max_6x3",
        name="VO2max 6x3",
        category=_C.VO2MAX,
        duration_minutes=55,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(65, 80),
        if_range=(0.85, 0.92),
        description="Six 3-minute efforts at 110-120% FTP with equal recovery.",
        intervals=(_iv(6, 180, 180, 110, 120),),
    ),
    WorkoutTemplate(
        workout_id="vo2max_5x4",
        name="VO2max 5x4",
        category=_C.VO2MAX,
        duration_minutes=60,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(70, 85),
        if_range=(0.86, 0.93),
        description="Five 4-minute efforts at 108-115% FTP.",
        intervals=(_iv(5, 240, 240, 108, 115),),
    ),
    WorkoutTemplate(
        workout_id="vo2max_5x5",
        name="VO2max 5x5",
        category=_C.VO2MAX,
        duration_minutes=75,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(80, 95),
        if_range=(0.88, 0.94),
        description="Five 5-minute efforts at 106-112% FTP.",
        intervals=(_iv(5, 300, 300, 106, 112),),
    ),
    # -- Anaerobic --------------------------------------------------------
    WorkoutTemplate(
        workout_id="anaerobic_30_30",
        name="30/30 Intervals",
        category=_C.ANAEROBIC,
        duration_minutes=55,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(60, 75),
        if_range=(0.82, 0.88),
        description="Two 10-minute sets of 30 s hard / 30 s easy.",
        intervals=(_iv(2, 600, 300, 130, 150, "20x (30s on/30s off)"),),
    ),
    WorkoutTemplate(
        workout_id="anaerobic_1min",
        name="1-Minute Repeats",
        category=_C.ANAEROBIC,
        duration_minutes=60,
        warmup_minutes=15,
        cooldown_minutes=10,
        tss_range=(65, 80),
        if_range=(0.83, 0.90),
        description="Eight 1-minute efforts at 130-150% FTP.",
        intervals=(_iv(8, 60, 180, 130, 150),),
    ),
)

_BY_ID: dict[str, WorkoutTemplate] = {w.workout_id: w for w in WORKOUT_LIBRARY}


def get_workout(workout_id: str) -> WorkoutTemplate | None:
    """Look up a workout by id."""
    return _BY_ID.get(workout_id)


def workouts_in_category(category: WorkoutCategory) -> tuple[WorkoutTemplate, ...]:
    return tuple(w for w in WORKOUT_LIBRARY if w.category == category)


def select_workout(
    category: WorkoutCategory,
    target_tss: float,
    preferred_ids: tuple[str, ...] = (),
) -> WorkoutTemplate | None:
    """Pick the workout for a key-workout slot.

    The first preferred id found in the library wins. Otherwise the
    category workout whose mid-range TSS is closest to *target_tss*
    (library order breaks ties). None when the category is empty.
    """
    for workout_id in preferred_ids:
        workout = get_workout(workout_id)
        if workout is not None:
            return workout
    candidates = workouts_in_category(category)
    if not candidates:
        return None
    return min(candidates, key=lambda w: abs(w.mid_tss - target_tss))
