"""Per-athlete DailyLoad history maintenance.

The recurrence is order dependent, so at most one extension of a given
athlete's history may run at a time. A second attempt while one is in
flight is rejected with ConcurrentExtensionError rather than queued.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, timedelta

from load_engine.math.stream_metrics import daily_tss_totals
from load_engine.math.training_load import (
    advance_daily_load,
    extend_history,
    replay_history,
)
from load_engine.models.daily_load import DailyLoad
from load_engine.models.samples import SessionLoad
from load_store.exceptions import ConcurrentExtensionError
from load_store.repository import TrainingRepository

logger = logging.getLogger(__name__)


class LoadHistoryService:
    """Extends and rebuilds stored PMC history from session loads."""

    def __init__(self, repository: TrainingRepository) -> None:
        self.repository = repository
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, athlete_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(athlete_id, threading.Lock())

    @contextmanager
    def exclusive(self, athlete_id: str) -> Iterator[None]:
        """Hold the athlete's extension lock or fail immediately."""
        lock = self._lock_for(athlete_id)
        if not lock.acquire(blocking=False):
            raise ConcurrentExtensionError(athlete_id)
        try:
            yield
        finally:
            lock.release()

    def current(self, athlete_id: str) -> DailyLoad | None:
        return self.repository.latest_daily_load(athlete_id)

    def record_session(self, athlete_id: str, session: SessionLoad) -> list[DailyLoad]:
        """Store a session.

        A session on a day that is still open leaves history untouched
        until the day is closed. A session dated on or before the latest
        closed day rebuilds the history through that day so its TSS is
        not lost.

        Returns:
            The rebuilt history, or an empty list when nothing was rebuilt.

        Raises:
            ConcurrentExtensionError: If a rebuild is needed while another
                extension is running. The session itself is stored.
        """
        self.repository.add_session(athlete_id, session)
        latest = self.repository.latest_daily_load(athlete_id)
        if latest is None or session.session_date > latest.day:
            return []
        logger.warning(
            "Late session on %s for %s, rebuilding load history through %s",
            session.session_date.isoformat(),
            athlete_id,
            latest.day.isoformat(),
        )
        return self.recompute(athlete_id, through=latest.day)

    def record_day(self, athlete_id: str, day: date, total_tss: float) -> DailyLoad:
        """Close exactly one calendar day with its total TSS.

        Raises:
            LoadOrderError: If *day* is not the day after the latest record.
            ConcurrentExtensionError: If another extension is running.
        """
        with self.exclusive(athlete_id):
            prior = self.repository.latest_daily_load(athlete_id)
            record = advance_daily_load(prior, day, total_tss)
            self.repository.append_daily_loads(athlete_id, [record])
        logger.debug("Closed %s for %s: tss=%.1f", day.isoformat(), athlete_id, total_tss)
        return record

    def extend_to(self, athlete_id: str, through: date) -> list[DailyLoad]:
        """Close every day after the latest record through *through*.

        Days come from stored sessions; days without sessions are closed
        with zero load. An athlete with no history starts on the date of
        their first session.

        Returns:
            The newly appended records, oldest first.
        """
        with self.exclusive(athlete_id):
            prior = self.repository.latest_daily_load(athlete_id)
            start = prior.day + timedelta(days=1) if prior is not None else None
            if start is not None and start > through:
                return []
            totals = daily_tss_totals(
                self.repository.sessions(athlete_id, start=start, end=through)
            )
            if prior is None and not totals:
                return []
            records = extend_history(prior, totals, through=through)
            if records:
                self.repository.append_daily_loads(athlete_id, records)
        if records:
            logger.info(
                "Extended load history for %s: %s..%s (%d days)",
                athlete_id,
                records[0].day.isoformat(),
                records[-1].day.isoformat(),
                len(records),
            )
        return records

    def recompute(self, athlete_id: str, through: date | None = None) -> list[DailyLoad]:
        """Replay the athlete's full history from cold start and replace it.

        Used after late or corrected sessions invalidate stored history.
        """
        with self.exclusive(athlete_id):
            records = self._replay(athlete_id, through)
        logger.info("Recomputed load history for %s (%d days)", athlete_id, len(records))
        return records

    def reconcile(self, athlete_id: str) -> list[DailyLoad]:
        """Rebuild history when stored sessions disagree with closed days.

        Catches sessions written straight to the store for a day that was
        already closed.

        Returns:
            The rebuilt history, or an empty list when it was consistent.
        """
        with self.exclusive(athlete_id):
            latest = self.repository.latest_daily_load(athlete_id)
            if latest is None:
                return []
            stale = self._first_stale_day(athlete_id, latest.day)
            if stale is None:
                return []
            records = self._replay(athlete_id, latest.day)
        logger.warning(
            "Sessions changed on closed day %s for %s, rebuilt %d days",
            stale.isoformat(),
            athlete_id,
            len(records),
        )
        return records

    def _first_stale_day(self, athlete_id: str, through: date) -> date | None:
        totals = daily_tss_totals(self.repository.sessions(athlete_id, end=through))
        closed = {
            r.day: r.contributing_tss
            for r in self.repository.daily_loads(athlete_id, end=through)
        }
        stale = [
            day
            for day, total in totals.items()
            if day not in closed
            or not math.isclose(closed[day], _closed_tss(total), abs_tol=1e-6)
        ]
        return min(stale) if stale else None

    def _replay(self, athlete_id: str, through: date | None) -> list[DailyLoad]:
        totals = daily_tss_totals(self.repository.sessions(athlete_id))
        records = replay_history(totals, through=through)
        self.repository.replace_daily_loads(athlete_id, records)
        return records


def _closed_tss(total: float) -> float:
    """The TSS a closed day records for a session total."""
    return total if math.isfinite(total) and total > 0.0 else 0.0
