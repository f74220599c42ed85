"""Enumerations and physical constants for the training load engine.

All thresholds and constants cite their published source where one exists.
"""

from enum import Enum, IntEnum, auto


class EventPriority(IntEnum):
    """Event priority classification for multi-event calendars.

    A = goal event, B = supporting event, C = training race / tune-up.
    """

    A = auto()
    B = auto()
    C = auto()


class PlanStatus(str, Enum):
    """Lifecycle status of a TrainingPlan."""

    DRAFT = "draft"
    ACTIVE = "active"
    ABANDONED = "abandoned"
    COMPLETED = "completed"


class DayStatus(str, Enum):
    """Lifecycle state of a single PlanDay.

    SCHEDULED is the only non-terminal state. RESCHEDULED marks a day whose
    workout moved to another date; it is excluded from the forward series.
    """

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    RESCHEDULED = "rescheduled"


class RiderType(str, Enum):
    """Power-profile archetypes."""

    SPRINTER = "sprinter"
    PURSUITER = "pursuiter"
    CLIMBER = "climber"
    TT_SPECIALIST = "tt_specialist"
    ALL_ROUNDER = "all_rounder"


class TemplateId(str, Enum):
    """Periodization templates the plan generator can expand."""

    BASE_BUILD_4WEEK = "base_build_4week"
    FTP_BUILD_8WEEK = "ftp_build_8week"
    TAPER_3WEEK = "taper_3week"
    EVENT_PREP_12WEEK = "event_prep_12week"
    MAINTENANCE_4WEEK = "maintenance_4week"


class PlanGoal(str, Enum):
    BASE_BUILD = "base_build"
    FTP_BUILD = "ftp_build"
    EVENT_PREP = "event_prep"
    TAPER = "taper"
    MAINTENANCE = "maintenance"


class TrainingPhase(str, Enum):
    """Phase label carried by each template week."""

    BASE = "base"
    BUILD = "build"
    PEAK = "peak"
    TAPER = "taper"
    RECOVERY = "recovery"
    MAINTENANCE = "maintenance"


class WorkoutCategory(str, Enum):
    """Workout categories ordered roughly by intensity."""

    RECOVERY = "recovery"
    ENDURANCE = "endurance"
    TEMPO = "tempo"
    SWEETSPOT = "sweetspot"
    THRESHOLD = "threshold"
    VO2MAX = "vo2max"
    ANAEROBIC = "anaerobic"
    SPRINT = "sprint"


class FormStatus(str, Enum):
    """Race-day freshness classification of a projected TSB."""

    OPTIMAL = "optimal"
    LOW = "low"
    HIGH = "high"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


# ---------------------------------------------------------------------------
# Performance Management Chart: Banister impulse-response model as
# popularised by Coggan & Allen (2010), Training and Racing with a Power Meter
# ---------------------------------------------------------------------------
CTL_TIME_CONSTANT_DAYS = 42  # chronic load ("fitness")
ATL_TIME_CONSTANT_DAYS = 7  # acute load ("fatigue")

# CTL trend band: change over 7 days beyond +/- this is "up"/"down"
CTL_TREND_WINDOW_DAYS = 7
CTL_TREND_THRESHOLD = 2.0

# Race-day TSB sweet spot: Coggan & Allen (2010)
RACE_TSB_OPTIMAL_LOW = 5.0
RACE_TSB_OPTIMAL_HIGH = 25.0

DEFAULT_PROJECTION_HORIZON_DAYS = 42

# ---------------------------------------------------------------------------
# Stream metrics: Coggan (2003) Normalized Power algorithm
# ---------------------------------------------------------------------------
NP_ROLLING_WINDOW_SAMPLES = 30  # 30 s at nominal 1 Hz
SECONDS_PER_HOUR = 3600

# Mean-maximal power durations (seconds) tracked for the power-duration curve
STANDARD_DURATIONS = (5, 30, 60, 120, 300, 600, 1200, 3600)

# ---------------------------------------------------------------------------
# Rider profile: W/kg thresholds after Allen & Coggan power profile tables
# ---------------------------------------------------------------------------
SPRINT_WKG_GOOD = 15.0
SPRINT_WKG_ELITE = 18.0
SPRINT_TO_FTP_RATIO = 3.5  # 5 s : 20 min power ratio
PURSUIT_WKG_GOOD = 7.0
PURSUIT_WKG_ELITE = 8.5
CLIMB_5MIN_WKG_GOOD = 5.0
CLIMB_5MIN_WKG_ELITE = 6.0
CLIMB_20MIN_WKG = 4.5
TT_20MIN_WKG_GOOD = 4.0
TT_20MIN_WKG_ELITE = 4.5

RULE_INCREMENT = 2
TT_COMBINED_INCREMENT = 1
MIN_ARCHETYPE_SCORE = 4  # below this the rider is an all-rounder

# Benchmarks used for strengths / limiters (W/kg)
BENCHMARK_5S_WKG = 15.0
BENCHMARK_1MIN_WKG = 7.0
BENCHMARK_5MIN_WKG = 5.0
BENCHMARK_20MIN_WKG = 4.0
STRENGTH_MARGIN = 1.10  # >= 110% of benchmark
LIMITER_MARGIN = 0.90  # < 90% of benchmark

# ---------------------------------------------------------------------------
# Plan generation
# ---------------------------------------------------------------------------
TAPER_MAX_WEEKS_OUT = 4
EVENT_PREP_MIN_WEEKS_OUT = 10
BASE_BUILD_MIN_WEEKS_OUT = 6
BASE_BUILD_MAX_WEEKS_OUT = 9
BASE_BUILD_CTL_CEILING = 50.0

DEFAULT_WEEKLY_HOURS = 8.0
TSS_PER_HOUR_MIXED = 60  # ~60 TSS/h for mixed-intensity riding
DAYS_PER_WEEK = 7
DEFAULT_KEY_WORKOUT_DAYS = (1, 3, 5)  # Tue, Thu, Sat (date.weekday())

# ---------------------------------------------------------------------------
# Plan day lifecycle
# ---------------------------------------------------------------------------
COMPLIANCE_CAP = 1.5  # actual TSS capped at 150% of target
