"""JSON-compatible dict codecs for stored models and whole-store snapshots.

Dates are ISO-8601 strings and enums their values. All functions are pure
(no I/O); callers read and write the JSON.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

from load_engine.models.daily_load import DailyLoad
from load_engine.models.enums import (
    DayStatus,
    EventPriority,
    PlanGoal,
    PlanStatus,
    WorkoutCategory,
)
from load_engine.models.event import Event
from load_engine.models.plan import PlanDay, TrainingPlan
from load_engine.models.projection import ProjectedFitness
from load_engine.models.samples import SessionLoad
from load_engine.models.workout import PersonalisedInterval
from load_store.memory import InMemoryRepository

SNAPSHOT_VERSION = 1


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


# ---------------------------------------------------------------------------
# Model codecs
# ---------------------------------------------------------------------------


def daily_load_to_dict(record: DailyLoad) -> dict:
    return {
        "day": record.day.isoformat(),
        "ctl": record.ctl,
        "atl": record.atl,
        "contributing_tss": record.contributing_tss,
    }


def daily_load_from_dict(data: dict) -> DailyLoad:
    return DailyLoad(
        day=date.fromisoformat(data["day"]),
        ctl=float(data["ctl"]),
        atl=float(data["atl"]),
        contributing_tss=float(data.get("contributing_tss", 0.0)),
    )


def session_to_dict(session: SessionLoad) -> dict:
    return {
        "session_date": session.session_date.isoformat(),
        "tss": session.tss,
        "session_id": session.session_id,
    }


def session_from_dict(data: dict) -> SessionLoad:
    return SessionLoad(
        session_date=date.fromisoformat(data["session_date"]),
        tss=float(data["tss"]),
        session_id=data.get("session_id"),
    )


def event_to_dict(event: Event) -> dict:
    return {
        "event_date": event.event_date.isoformat(),
        "priority": event.priority.name,
        "name": event.name,
        "event_id": event.event_id,
    }


def event_from_dict(data: dict) -> Event:
    return Event(
        event_date=date.fromisoformat(data["event_date"]),
        priority=EventPriority[data["priority"]],
        name=data["name"],
        event_id=data.get("event_id"),
    )


def plan_to_dict(plan: TrainingPlan) -> dict:
    return {
        "plan_id": plan.plan_id,
        "athlete_id": plan.athlete_id,
        "name": plan.name,
        "goal": plan.goal.value,
        "template_id": plan.template_id,
        "start_date": plan.start_date.isoformat(),
        "end_date": plan.end_date.isoformat(),
        "duration_weeks": plan.duration_weeks,
        "status": plan.status.value,
        "progress_percent": plan.progress_percent,
        "weekly_hours_target": plan.weekly_hours_target,
        "target_event_date": _iso(plan.target_event_date),
        "description": plan.description,
    }


def plan_from_dict(data: dict) -> TrainingPlan:
    return TrainingPlan(
        plan_id=data["plan_id"],
        athlete_id=data["athlete_id"],
        name=data["name"],
        goal=PlanGoal(data["goal"]),
        template_id=data["template_id"],
        start_date=date.fromisoformat(data["start_date"]),
        end_date=date.fromisoformat(data["end_date"]),
        duration_weeks=int(data["duration_weeks"]),
        status=PlanStatus(data.get("status", PlanStatus.DRAFT.value)),
        progress_percent=int(data.get("progress_percent", 0)),
        weekly_hours_target=data.get("weekly_hours_target"),
        target_event_date=_date(data.get("target_event_date")),
        description=data.get("description", ""),
    )


def _interval_to_dict(interval: PersonalisedInterval) -> dict:
    return {
        "sets": interval.sets,
        "duration_seconds": interval.duration_seconds,
        "rest_seconds": interval.rest_seconds,
        "target_power_min": interval.target_power_min,
        "target_power_max": interval.target_power_max,
    }


def plan_day_to_dict(day: PlanDay) -> dict:
    return {
        "day_id": day.day_id,
        "plan_id": day.plan_id,
        "day": day.day.isoformat(),
        "week_number": day.week_number,
        "target_tss": day.target_tss,
        "workout_template_ref": day.workout_template_ref,
        "workout_name": day.workout_name,
        "category": day.category.value if day.category else None,
        "target_duration_minutes": day.target_duration_minutes,
        "target_if": day.target_if,
        "intervals": [_interval_to_dict(iv) for iv in day.intervals],
        "is_key_workout": day.is_key_workout,
        "week_focus": day.week_focus,
        "status": day.status.value,
        "actual_tss": day.actual_tss,
        "actual_duration_minutes": day.actual_duration_minutes,
        "athlete_notes": day.athlete_notes,
        "compliance_score": day.compliance_score,
        "rescheduled_to": _iso(day.rescheduled_to),
        "rescheduled_from": _iso(day.rescheduled_from),
    }


def plan_day_from_dict(data: dict) -> PlanDay:
    category = data.get("category")
    return PlanDay(
        day_id=data["day_id"],
        plan_id=data["plan_id"],
        day=date.fromisoformat(data["day"]),
        week_number=int(data["week_number"]),
        target_tss=data.get("target_tss"),
        workout_template_ref=data.get("workout_template_ref"),
        workout_name=data.get("workout_name"),
        category=WorkoutCategory(category) if category else None,
        target_duration_minutes=data.get("target_duration_minutes"),
        target_if=data.get("target_if"),
        intervals=tuple(PersonalisedInterval(**iv) for iv in data.get("intervals", [])),
        is_key_workout=bool(data.get("is_key_workout", False)),
        week_focus=data.get("week_focus", ""),
        status=DayStatus(data.get("status", DayStatus.SCHEDULED.value)),
        actual_tss=data.get("actual_tss"),
        actual_duration_minutes=data.get("actual_duration_minutes"),
        athlete_notes=data.get("athlete_notes"),
        compliance_score=data.get("compliance_score"),
        rescheduled_to=_date(data.get("rescheduled_to")),
        rescheduled_from=_date(data.get("rescheduled_from")),
    )


def projection_to_records(projections: Sequence[ProjectedFitness]) -> list[dict]:
    """Flatten a projected series for charts and logs (values to 1 decimal)."""
    return [
        {
            "date": p.day.isoformat(),
            "ctl": round(p.projected_ctl, 1),
            "atl": round(p.projected_atl, 1),
            "tsb": round(p.projected_tsb, 1),
            "planned_tss": round(p.planned_tss, 1),
            "event": p.event_name,
            "event_priority": p.event_priority.name if p.event_priority else None,
            "completed": p.is_completed,
            "skipped": p.is_skipped,
        }
        for p in projections
    ]


# ---------------------------------------------------------------------------
# Store snapshots
# ---------------------------------------------------------------------------


def dump_repository(repository: InMemoryRepository) -> dict[str, Any]:
    """Capture every athlete's stored data as one JSON-compatible dict."""
    athletes: dict[str, dict] = {}
    for athlete_id in repository.athlete_ids():
        plans = repository.plans_for_athlete(athlete_id)
        athletes[athlete_id] = {
            "daily_loads": [daily_load_to_dict(r) for r in repository.daily_loads(athlete_id)],
            "sessions": [session_to_dict(s) for s in repository.sessions(athlete_id)],
            "events": [event_to_dict(e) for e in repository.all_events(athlete_id)],
            "plans": [plan_to_dict(p) for p in plans],
            "plan_days": [
                plan_day_to_dict(d) for p in plans for d in repository.plan_days(p.plan_id)
            ],
        }
    return {"version": SNAPSHOT_VERSION, "athletes": athletes}


def load_repository(data: dict[str, Any] | None) -> InMemoryRepository:
    """Rebuild an InMemoryRepository from ``dump_repository`` output.

    Raises:
        ValueError: If the snapshot version is not supported.
    """
    repository = InMemoryRepository()
    if not data:
        return repository
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported snapshot version: {version}")

    for athlete_id, stored in data.get("athletes", {}).items():
        repository.replace_daily_loads(
            athlete_id, [daily_load_from_dict(r) for r in stored.get("daily_loads", [])]
        )
        for session in stored.get("sessions", []):
            repository.add_session(athlete_id, session_from_dict(session))
        for event in stored.get("events", []):
            repository.add_event(athlete_id, event_from_dict(event))
        for plan in stored.get("plans", []):
            repository.save_plan(plan_from_dict(plan))
        repository.save_plan_days(plan_day_from_dict(d) for d in stored.get("plan_days", []))
    return repository
