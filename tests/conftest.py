"""Shared test fixtures: workout streams, athletes, plans and stores."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Sequence

import pytest

from load_engine.engine import TrainingLoadEngine
from load_engine.models.daily_load import DailyLoad
from load_engine.models.enums import EventPriority, TemplateId
from load_engine.models.event import Event
from load_engine.models.plan import PlanDay, TrainingPlan
from load_engine.models.samples import FtpEntry, FtpHistory, PowerSample
from load_engine.plans.generator import PlanContext, generate_plan
from load_store.memory import InMemoryRepository

RIDE_START = datetime(2026, 3, 2, 8, 0, 0)
PLAN_START = date(2026, 3, 2)  # a Monday


def make_samples(
    powers: Sequence[float | None],
    start: datetime = RIDE_START,
    interval_seconds: float = 1.0,
    heart_rate: int | None = None,
) -> list[PowerSample]:
    """A stream with one sample per power value at a fixed interval."""
    return [
        PowerSample(
            timestamp=start + timedelta(seconds=i * interval_seconds),
            power_watts=p,
            heart_rate=heart_rate,
        )
        for i, p in enumerate(powers)
    ]


@pytest.fixture
def samples_factory() -> Callable[..., list[PowerSample]]:
    return make_samples


@pytest.fixture
def steady_hour() -> list[PowerSample]:
    """3600 s at a constant 250 W, 1 Hz."""
    return make_samples([250.0] * 3600, heart_rate=150)


@pytest.fixture
def ftp_history() -> FtpHistory:
    """FTP 240 W from January, retested to 260 W in March."""
    return FtpHistory.from_entries(
        FtpEntry(effective_date=date(2026, 3, 1), ftp_watts=260),
        FtpEntry(effective_date=date(2026, 1, 1), ftp_watts=240),
    )


@pytest.fixture
def fit_athlete_load() -> DailyLoad:
    """Well-trained athlete closing 1 March: CTL 70, ATL 60."""
    return DailyLoad(day=date(2026, 3, 1), ctl=70.0, atl=60.0)


@pytest.fixture
def goal_event() -> Event:
    return Event(
        event_date=PLAN_START + timedelta(days=20),
        priority=EventPriority.A,
        name="Spring Classic",
        event_id="ev-1",
    )


@pytest.fixture
def plan_context() -> PlanContext:
    return PlanContext(athlete_id="rider-1", ctl=60.0, ftp=250, weekly_hours=8.0)


@pytest.fixture
def base_plan(plan_context: PlanContext) -> tuple[TrainingPlan, list[PlanDay]]:
    """4-week base plan starting Monday 2 March 2026."""
    return generate_plan(TemplateId.BASE_BUILD_4WEEK, PLAN_START, plan_context)


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def stored_plan(
    repository: InMemoryRepository, base_plan: tuple[TrainingPlan, list[PlanDay]]
) -> tuple[TrainingPlan, list[PlanDay]]:
    plan, days = base_plan
    repository.save_plan(plan)
    repository.save_plan_days(days)
    return plan, days


@pytest.fixture
def engine(repository: InMemoryRepository) -> TrainingLoadEngine:
    return TrainingLoadEngine(repository)