"""Abstract persistence interface consumed by the engine.

Implementations own per-athlete DailyLoad history, session loads, plans,
plan days and events. Lookups by id raise NotFoundError; writes that would
break a stored invariant raise ConflictError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from datetime import date

from load_engine.models.daily_load import DailyLoad
from load_engine.models.enums import PlanStatus
from load_engine.models.event import Event
from load_engine.models.plan import PlanDay, TrainingPlan
from load_engine.models.samples import SessionLoad


class TrainingRepository(ABC):
    """Storage collaborator for the training load engine."""

    # -- Athletes -----------------------------------------------------------

    @abstractmethod
    def athlete_ids(self) -> list[str]:
        """Every athlete with any stored data, sorted."""

    # -- DailyLoad history --------------------------------------------------

    @abstractmethod
    def latest_daily_load(self, athlete_id: str) -> DailyLoad | None:
        """Most recent DailyLoad, or None for an athlete with no history."""

    @abstractmethod
    def daily_loads(
        self, athlete_id: str, start: date | None = None, end: date | None = None
    ) -> list[DailyLoad]:
        """History in [start, end] inclusive, oldest first."""

    @abstractmethod
    def append_daily_loads(self, athlete_id: str, records: Sequence[DailyLoad]) -> None:
        """Append records after the latest stored day.

        Raises:
            ConflictError: If any record's date is already stored.
            LoadOrderError: If the records do not continue the history
                one day at a time.
        """

    @abstractmethod
    def replace_daily_loads(self, athlete_id: str, records: Sequence[DailyLoad]) -> None:
        """Replace the athlete's whole history in one write."""

    # -- Session loads ------------------------------------------------------

    @abstractmethod
    def add_session(self, athlete_id: str, session: SessionLoad) -> None:
        ...

    @abstractmethod
    def sessions(
        self, athlete_id: str, start: date | None = None, end: date | None = None
    ) -> list[SessionLoad]:
        """Sessions in [start, end] inclusive, ordered by date."""

    # -- Plans --------------------------------------------------------------

    @abstractmethod
    def save_plan(self, plan: TrainingPlan) -> None:
        """Insert or replace a plan by id."""

    @abstractmethod
    def get_plan(self, plan_id: str) -> TrainingPlan:
        """Raises NotFoundError if the id is unknown."""

    @abstractmethod
    def plans_for_athlete(
        self, athlete_id: str, status: PlanStatus | None = None
    ) -> list[TrainingPlan]:
        ...

    def active_plans(self, athlete_id: str) -> list[TrainingPlan]:
        return self.plans_for_athlete(athlete_id, PlanStatus.ACTIVE)

    def active_plan(self, athlete_id: str) -> TrainingPlan | None:
        """The athlete's active plan; the latest-starting one if several."""
        active = self.active_plans(athlete_id)
        if not active:
            return None
        return max(active, key=lambda p: p.start_date)

    # -- Plan days ----------------------------------------------------------

    @abstractmethod
    def save_plan_days(self, days: Iterable[PlanDay]) -> None:
        """Insert or replace plan days by id."""

    def save_plan_day(self, day: PlanDay) -> None:
        self.save_plan_days([day])

    @abstractmethod
    def get_plan_day(self, day_id: str) -> PlanDay:
        """Raises NotFoundError if the id is unknown."""

    @abstractmethod
    def plan_days(self, plan_id: str) -> list[PlanDay]:
        """All days of a plan ordered by date, rescheduled-away days included."""

    # -- Events -------------------------------------------------------------

    @abstractmethod
    def add_event(self, athlete_id: str, event: Event) -> None:
        ...

    @abstractmethod
    def events_in_range(self, athlete_id: str, start: date, end: date) -> list[Event]:
        """Events dated in [start, end] inclusive, chronological."""
