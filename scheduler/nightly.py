"""Nightly scheduler: closes each athlete's training day and logs the projection.

Usage:
    python -m scheduler.nightly --once      # single run (for cron)
    python -m scheduler.nightly --daemon    # APScheduler loop
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date, timedelta
from pathlib import Path

from load_engine.engine import TrainingLoadEngine
from load_engine.serialization import dump_repository, load_repository
from load_store.exceptions import StoreError
from load_store.memory import InMemoryRepository

from scheduler.config import (
    LOG_LEVEL,
    NIGHTLY_HOUR,
    NIGHTLY_MINUTE,
    PROJECTION_HORIZON_DAYS,
    SNAPSHOT_PATH,
)

logger = logging.getLogger(__name__)


def _load_snapshot(path: Path) -> InMemoryRepository:
    """Load the store from disk; a missing file starts an empty store."""
    try:
        with open(path) as f:
            return load_repository(json.load(f))
    except FileNotFoundError:
        logger.warning("Snapshot not found at %s, starting empty", path)
        return InMemoryRepository()


def _save_snapshot(repository: InMemoryRepository, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w") as f:
        json.dump(dump_repository(repository), f, indent=2)
    tmp.replace(path)


def nightly_job(
    snapshot_path: Path | None = None,
    today: date | None = None,
    horizon_days: int | None = None,
) -> dict[str, int]:
    """Execute one nightly cycle.

    For every athlete: rebuild history when sessions arrived for days that
    are already closed, close every day through yesterday, refresh the
    active plan's progress and log its forward projection. *today* stays
    open because it may still gain sessions. One athlete's failure does
    not stop the others.

    Returns:
        Days appended per athlete.
    """
    path = snapshot_path or SNAPSHOT_PATH
    today = today or date.today()
    through = today - timedelta(days=1)
    horizon = horizon_days if horizon_days is not None else PROJECTION_HORIZON_DAYS
    logger.info(
        "Starting nightly job for %s (closing through %s)",
        today.isoformat(),
        through.isoformat(),
    )

    repository = _load_snapshot(path)
    engine = TrainingLoadEngine(repository)

    appended: dict[str, int] = {}
    for athlete_id in repository.athlete_ids():
        # 1. Pick up late sessions, then close every day through yesterday
        try:
            engine.reconcile_history(athlete_id)
            records = engine.extend_history(athlete_id, through=through)
        except StoreError as exc:
            logger.error("Failed to extend history for %s: %s", athlete_id, exc)
            continue
        appended[athlete_id] = len(records)

        current = engine.current_load(athlete_id)
        if current is not None:
            ctl, atl, tsb = current.rounded(1)
            logger.info(
                "%s on %s: CTL %.1f, ATL %.1f, TSB %.1f (%s)",
                athlete_id,
                current.day.isoformat(),
                ctl,
                atl,
                tsb,
                engine.fitness_trend(athlete_id).value,
            )

        # 2. Refresh the active plan and project it forward
        plan = repository.active_plan(athlete_id)
        if plan is None:
            continue
        try:
            percent = engine.recompute_plan_progress(plan.plan_id)
        except StoreError as exc:
            logger.warning("Progress recompute failed for %s: %s", plan.plan_id, exc)
        else:
            logger.info("Plan %s progress: %d%%", plan.plan_id, percent)

        summary = engine.projection_summary(athlete_id, horizon, plan.plan_id)
        if summary.peak_ctl_date is not None:
            logger.info(
                "Projection for %s over %d days: peak CTL %.1f on %s, end CTL %.1f",
                athlete_id,
                horizon,
                summary.peak_ctl,
                summary.peak_ctl_date.isoformat(),
                summary.end_ctl,
            )
        for event in summary.event_summaries:
            logger.info(
                "  %s on %s: TSB %.1f (%s)",
                event.name,
                event.day.isoformat(),
                event.tsb,
                event.status.value,
            )

    # 3. Persist
    try:
        _save_snapshot(repository, path)
    except OSError as exc:
        logger.error("Failed to save snapshot to %s: %s", path, exc)
        return appended

    logger.info("Nightly job complete (%d athletes)", len(appended))
    return appended


def main() -> None:
    parser = argparse.ArgumentParser(description="Training load nightly scheduler")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--once", action="store_true", help="Run once and exit")
    group.add_argument("--daemon", action="store_true", help="Run as APScheduler daemon")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.once:
        nightly_job()
    else:
        from apscheduler.schedulers.blocking import BlockingScheduler

        scheduler = BlockingScheduler()
        scheduler.add_job(
            nightly_job,
            "cron",
            hour=NIGHTLY_HOUR,
            minute=NIGHTLY_MINUTE,
            id="nightly_job",
        )
        logger.info(
            "Scheduler started, nightly job at %02d:%02d",
            NIGHTLY_HOUR,
            NIGHTLY_MINUTE,
        )
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
