"""Data models for the training load engine."""

from load_engine.models.daily_load import DailyLoad
from load_engine.models.enums import (
    DayStatus,
    EventPriority,
    FormStatus,
    PlanGoal,
    PlanStatus,
    RiderType,
    TemplateId,
    TrainingPhase,
    Trend,
    WorkoutCategory,
)
from load_engine.models.event import Event, EventCalendar
from load_engine.models.plan import (
    Annotate,
    Complete,
    DayAction,
    PlanDay,
    PlanProgress,
    PlanWeek,
    Reschedule,
    Skip,
    TrainingPlan,
)
from load_engine.models.projection import (
    EventFormSummary,
    ProjectedFitness,
    ProjectionSummary,
)
from load_engine.models.rider_profile import (
    ArchetypeScores,
    PowerCurvePoint,
    RiderProfile,
)
from load_engine.models.samples import (
    FtpEntry,
    FtpHistory,
    PowerSample,
    SessionLoad,
    WorkoutMetrics,
)
from load_engine.models.workout import (
    PersonalisedInterval,
    WorkoutInterval,
    WorkoutTemplate,
)

__all__ = [
    "Annotate",
    "ArchetypeScores",
    "Complete",
    "DailyLoad",
    "DayAction",
    "DayStatus",
    "Event",
    "EventCalendar",
    "EventFormSummary",
    "EventPriority",
    "FormStatus",
    "FtpEntry",
    "FtpHistory",
    "PersonalisedInterval",
    "PlanDay",
    "PlanGoal",
    "PlanProgress",
    "PlanWeek",
    "PlanStatus",
    "PowerCurvePoint",
    "PowerSample",
    "ProjectedFitness",
    "ProjectionSummary",
    "Reschedule",
    "RiderProfile",
    "RiderType",
    "SessionLoad",
    "Skip",
    "TemplateId",
    "TrainingPhase",
    "TrainingPlan",
    "Trend",
    "WorkoutCategory",
    "WorkoutInterval",
    "WorkoutMetrics",
    "WorkoutTemplate",
]
