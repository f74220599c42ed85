"""In-process TrainingRepository backed by dictionaries.

Used by tests and by the nightly job, which loads it from and saves it to a
JSON snapshot. A single re-entrant lock serialises all reads and writes.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from load_engine.models.daily_load import DailyLoad
from load_engine.models.enums import PlanStatus
from load_engine.models.event import Event
from load_engine.models.plan import PlanDay, TrainingPlan
from load_engine.models.samples import SessionLoad
from load_store.exceptions import ConflictError, LoadOrderError, NotFoundError
from load_store.repository import TrainingRepository


def _in_range(day: date, start: date | None, end: date | None) -> bool:
    return (start is None or day >= start) and (end is None or day <= end)


class InMemoryRepository(TrainingRepository):
    """Dictionary-backed repository.

    DailyLoad history is keyed by (athlete, date), so a second record for
    the same day is rejected rather than silently overwritten.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._loads: dict[str, dict[date, DailyLoad]] = {}
        self._sessions: dict[str, list[SessionLoad]] = {}
        self._plans: dict[str, TrainingPlan] = {}
        self._days: dict[str, PlanDay] = {}
        self._events: dict[str, list[Event]] = {}

    # -- Athletes -----------------------------------------------------------

    def athlete_ids(self) -> list[str]:
        with self._lock:
            ids = set(self._loads) | set(self._sessions) | set(self._events)
            ids.update(p.athlete_id for p in self._plans.values())
            return sorted(ids)

    # -- DailyLoad history --------------------------------------------------

    def latest_daily_load(self, athlete_id: str) -> DailyLoad | None:
        with self._lock:
            history = self._loads.get(athlete_id)
            if not history:
                return None
            return history[max(history)]

    def daily_loads(
        self, athlete_id: str, start: date | None = None, end: date | None = None
    ) -> list[DailyLoad]:
        with self._lock:
            history = self._loads.get(athlete_id, {})
            return [history[d] for d in sorted(history) if _in_range(d, start, end)]

    def append_daily_loads(self, athlete_id: str, records: Sequence[DailyLoad]) -> None:
        with self._lock:
            history = self._loads.setdefault(athlete_id, {})
            expected = max(history) + timedelta(days=1) if history else None
            for record in records:
                if record.day in history:
                    raise ConflictError(
                        f"DailyLoad for {athlete_id} on {record.day.isoformat()} "
                        "already exists"
                    )
                if expected is not None and record.day != expected:
                    raise LoadOrderError(
                        f"DailyLoad for {athlete_id} on {record.day.isoformat()} "
                        f"does not follow {(expected - timedelta(days=1)).isoformat()}"
                    )
                expected = record.day + timedelta(days=1)
            for record in records:
                history[record.day] = record

    def replace_daily_loads(self, athlete_id: str, records: Sequence[DailyLoad]) -> None:
        with self._lock:
            self._loads[athlete_id] = {r.day: r for r in records}

    # -- Session loads ------------------------------------------------------

    def add_session(self, athlete_id: str, session: SessionLoad) -> None:
        with self._lock:
            self._sessions.setdefault(athlete_id, []).append(session)

    def sessions(
        self, athlete_id: str, start: date | None = None, end: date | None = None
    ) -> list[SessionLoad]:
        with self._lock:
            found = [
                s
                for s in self._sessions.get(athlete_id, [])
                if _in_range(s.session_date, start, end)
            ]
            return sorted(found, key=lambda s: s.session_date)

    # -- Plans --------------------------------------------------------------

    def save_plan(self, plan: TrainingPlan) -> None:
        with self._lock:
            self._plans[plan.plan_id] = plan

    def get_plan(self, plan_id: str) -> TrainingPlan:
        with self._lock:
            try:
                return self._plans[plan_id]
            except KeyError:
                raise NotFoundError("TrainingPlan", plan_id) from None

    def plans_for_athlete(
        self, athlete_id: str, status: PlanStatus | None = None
    ) -> list[TrainingPlan]:
        with self._lock:
            plans = [
                p
                for p in self._plans.values()
                if p.athlete_id == athlete_id and (status is None or p.status == status)
            ]
            return sorted(plans, key=lambda p: (p.start_date, p.plan_id))

    # -- Plan days ----------------------------------------------------------

    def save_plan_days(self, days: Iterable[PlanDay]) -> None:
        with self._lock:
            for day in days:
                self._days[day.day_id] = day

    def get_plan_day(self, day_id: str) -> PlanDay:
        with self._lock:
            try:
                return self._days[day_id]
            except KeyError:
                raise NotFoundError("PlanDay", day_id) from None

    def plan_days(self, plan_id: str) -> list[PlanDay]:
        with self._lock:
            days = [d for d in self._days.values() if d.plan_id == plan_id]
            return sorted(days, key=lambda d: (d.day, d.day_id))

    # -- Events -------------------------------------------------------------

    def add_event(self, athlete_id: str, event: Event) -> None:
        with self._lock:
            self._events.setdefault(athlete_id, []).append(event)

    def events_in_range(self, athlete_id: str, start: date, end: date) -> list[Event]:
        with self._lock:
            found = [
                e for e in self._events.get(athlete_id, []) if start <= e.event_date <= end
            ]
            return sorted(found, key=lambda e: (e.event_date, e.priority))

    def all_events(self, athlete_id: str) -> list[Event]:
        with self._lock:
            return sorted(self._events.get(athlete_id, []), key=lambda e: e.event_date)
