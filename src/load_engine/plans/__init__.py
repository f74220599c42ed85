"""Plan templates, the workout library and the plan generator."""

from load_engine.plans.generator import (
    PlanContext,
    baseline_weekly_tss,
    generate_plan,
    plan_weeks,
    select_template,
    weeks_until,
)
from load_engine.plans.library import WORKOUT_LIBRARY, get_workout, select_workout
from load_engine.plans.templates import (
    PLAN_TEMPLATES,
    PlanTemplate,
    applicable_templates,
    get_template,
)

__all__ = [
    "PLAN_TEMPLATES",
    "PlanContext",
    "PlanTemplate",
    "WORKOUT_LIBRARY",
    "applicable_templates",
    "baseline_weekly_tss",
    "generate_plan",
    "get_template",
    "get_workout",
    "plan_weeks",
    "select_template",
    "select_workout",
    "weeks_until",
]
