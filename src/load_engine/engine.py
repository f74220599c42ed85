"""TrainingLoadEngine: the facade request handlers call into."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta

from load_engine.history import LoadHistoryService
from load_engine.lifecycle import ActivationResult, PlanLifecycleEngine
from load_engine.math.projection import project_forward, projection_summary
from load_engine.math.rider_profile import classify_rider_profile
from load_engine.math.stream_metrics import compute_session_metrics, compute_workout_metrics
from load_engine.math.training_load import ctl_trend
from load_engine.models.daily_load import DailyLoad
from load_engine.models.enums import DEFAULT_PROJECTION_HORIZON_DAYS, TemplateId, Trend
from load_engine.models.event import EventCalendar
from load_engine.models.plan import PlanDay, TrainingPlan
from load_engine.models.projection import ProjectedFitness, ProjectionSummary
from load_engine.models.rider_profile import PowerCurvePoint, RiderProfile
from load_engine.models.samples import FtpHistory, PowerSample, SessionLoad, WorkoutMetrics
from load_engine.plans.generator import (
    PlanContext,
    generate_plan,
    select_template,
    weeks_until,
)
from load_store.exceptions import ConflictError, NotFoundError, StoreError
from load_store.memory import InMemoryRepository
from load_store.repository import TrainingRepository

logger = logging.getLogger(__name__)


class TrainingLoadEngine:
    """Ties the pure calculators to a repository.

    Usage:
        engine = TrainingLoadEngine(repository)
        metrics = engine.record_session("a1", ride_date, samples, ftp_history)
        engine.extend_history("a1", through=date.today())
        series = engine.project("a1", horizon_days=42)
    """

    def __init__(self, repository: TrainingRepository | None = None) -> None:
        self.repository = repository or InMemoryRepository()
        self.history = LoadHistoryService(self.repository)
        self.lifecycle = PlanLifecycleEngine(self.repository)

    # -- Sessions -----------------------------------------------------------

    @staticmethod
    def compute_workout_metrics(
        samples: Sequence[PowerSample],
        ftp: int | None,
        duration_seconds: float | None = None,
    ) -> WorkoutMetrics:
        return compute_workout_metrics(samples, ftp, duration_seconds)

    def record_session(
        self,
        athlete_id: str,
        ride_date: date,
        samples: Sequence[PowerSample],
        ftp_history: FtpHistory,
        session_id: str | None = None,
        duration_seconds: float | None = None,
    ) -> WorkoutMetrics:
        """Compute a session's metrics with the FTP valid on *ride_date* and store its load.

        A ride dated on an already closed day rebuilds the load history.
        """
        metrics = compute_session_metrics(samples, ftp_history, ride_date, duration_seconds)
        self.history.record_session(
            athlete_id,
            SessionLoad(session_date=ride_date, tss=metrics.tss, session_id=session_id),
        )
        return metrics

    # -- Load history -------------------------------------------------------

    def advance_daily_load(self, athlete_id: str, day: date, total_tss: float) -> DailyLoad:
        return self.history.record_day(athlete_id, day, total_tss)

    def extend_history(self, athlete_id: str, through: date) -> list[DailyLoad]:
        return self.history.extend_to(athlete_id, through)

    def recompute_history(self, athlete_id: str, through: date | None = None) -> list[DailyLoad]:
        return self.history.recompute(athlete_id, through)

    def reconcile_history(self, athlete_id: str) -> list[DailyLoad]:
        return self.history.reconcile(athlete_id)

    def current_load(self, athlete_id: str) -> DailyLoad | None:
        return self.history.current(athlete_id)

    def fitness_trend(self, athlete_id: str) -> Trend:
        latest = self.repository.latest_daily_load(athlete_id)
        if latest is None:
            return Trend.STABLE
        start = latest.day - timedelta(days=14)
        return ctl_trend(self.repository.daily_loads(athlete_id, start=start))

    # -- Projection ---------------------------------------------------------

    def project(
        self,
        athlete_id: str,
        horizon_days: int = DEFAULT_PROJECTION_HORIZON_DAYS,
        plan_id: str | None = None,
    ) -> list[ProjectedFitness]:
        """Project the athlete's PMC over the horizon.

        Uses *plan_id* or, by default, the athlete's active plan. Repository
        failures are logged and yield an empty series.
        """
        try:
            current = self.repository.latest_daily_load(athlete_id)
            if current is None or horizon_days <= 0:
                return []
            start = current.day + timedelta(days=1)
            end = start + timedelta(days=horizon_days - 1)
            plan_days = self._plan_days_for(athlete_id, plan_id)
            events = self.repository.events_in_range(athlete_id, start, end)
        except StoreError:
            logger.exception("Projection unavailable for athlete %s", athlete_id)
            return []
        return project_forward(
            current,
            [d for d in plan_days if start <= d.day <= end],
            EventCalendar.from_entries(*events),
            horizon_days,
        )

    def projection_summary(
        self,
        athlete_id: str,
        horizon_days: int = DEFAULT_PROJECTION_HORIZON_DAYS,
        plan_id: str | None = None,
    ) -> ProjectionSummary:
        return projection_summary(self.project(athlete_id, horizon_days, plan_id))

    def _plan_days_for(self, athlete_id: str, plan_id: str | None) -> list[PlanDay]:
        if plan_id is None:
            plan = self.repository.active_plan(athlete_id)
            if plan is None:
                return []
            plan_id = plan.plan_id
        return self.repository.plan_days(plan_id)

    # -- Rider profile ------------------------------------------------------

    @staticmethod
    def classify_rider(
        power_curve: Mapping[int, float] | Iterable[PowerCurvePoint] | None,
        weight_kg: float | None,
    ) -> RiderProfile | None:
        return classify_rider_profile(power_curve, weight_kg)

    # -- Plans --------------------------------------------------------------

    @staticmethod
    def select_template(weeks_until_event: int, current_ctl: float) -> TemplateId:
        return select_template(weeks_until_event, current_ctl)

    def generate_plan(
        self,
        template_id: TemplateId | str,
        start_date: date,
        context: PlanContext | None = None,
    ) -> tuple[TrainingPlan, list[PlanDay]]:
        """Generate a draft plan and store it.

        Raises:
            ConflictError: If a plan with the same id is already stored.
        """
        plan, days = generate_plan(template_id, start_date, context)
        try:
            self.repository.get_plan(plan.plan_id)
        except NotFoundError:
            pass
        else:
            raise ConflictError(f"Plan {plan.plan_id} already exists")
        self.repository.save_plan(plan)
        self.repository.save_plan_days(days)
        logger.info(
            "Generated %s plan %s (%d days)", plan.template_id, plan.plan_id, len(days)
        )
        return plan, days

    def plan_for_event(
        self,
        athlete_id: str,
        start_date: date,
        event_date: date | None = None,
        ftp: int | None = None,
        weekly_hours: float | None = None,
    ) -> tuple[TrainingPlan, list[PlanDay]]:
        """Pick a template from the weeks to the target event and current CTL, then generate it.

        Without *event_date* the athlete's stored calendar supplies the
        target: the next A event on or after *start_date*, else the next
        event of any priority.

        Raises:
            NotFoundError: If no *event_date* is given and no event is stored
                on or after *start_date*.
        """
        if event_date is None:
            calendar = EventCalendar.from_entries(
                *self.repository.events_in_range(athlete_id, start_date, date.max)
            )
            target = calendar.target_event(start_date)
            if target is None:
                raise NotFoundError("Event", f"{athlete_id} on or after {start_date.isoformat()}")
            event_date = target.event_date
        current = self.repository.latest_daily_load(athlete_id)
        ctl = current.ctl if current is not None else 0.0
        template_id = select_template(weeks_until(start_date, event_date), ctl)
        context = PlanContext(
            athlete_id=athlete_id,
            ctl=ctl,
            ftp=ftp,
            weekly_hours=weekly_hours,
            target_event_date=event_date,
        )
        return self.generate_plan(template_id, start_date, context)

    # -- Lifecycle ----------------------------------------------------------

    def complete_day(
        self,
        day_id: str,
        actual_tss: float | None = None,
        actual_duration_minutes: float | None = None,
        notes: str | None = None,
    ) -> PlanDay:
        return self.lifecycle.complete_day(day_id, actual_tss, actual_duration_minutes, notes)

    def skip_day(self, day_id: str, notes: str | None = None) -> PlanDay:
        return self.lifecycle.skip_day(day_id, notes)

    def reschedule_day(self, day_id: str, new_date: date) -> tuple[PlanDay, PlanDay]:
        return self.lifecycle.reschedule_day(day_id, new_date)

    def annotate_day(self, day_id: str, notes: str) -> PlanDay:
        return self.lifecycle.annotate_day(day_id, notes)

    def recompute_plan_progress(self, plan_id: str) -> int:
        return self.lifecycle.recompute_plan_progress(plan_id)

    def activate_plan(self, plan_id: str) -> ActivationResult:
        return self.lifecycle.activate_plan(plan_id)

    def complete_plan(self, plan_id: str) -> TrainingPlan:
        return self.lifecycle.complete_plan(plan_id)

    def abandon_plan(self, plan_id: str) -> TrainingPlan:
        return self.lifecycle.abandon_plan(plan_id)
