"""Performance Management Chart: CTL, ATL and TSB as exponentially weighted loads.

Daily update given yesterday's (ctl, atl) and today's total TSS T:

    ctl = ctl_prev + (T - ctl_prev) * (1 - e^(-1/42))
    atl = atl_prev + (T - atl_prev) * (1 - e^(-1/7))
    tsb = ctl - atl

The recurrence is applied exactly once per calendar day. Gaps are filled
with T = 0 days one at a time; decay is never collapsed into a single
multi-day step. Replaying the same ordered history always reproduces the
same floating-point series.

References:
    Banister et al. (1975). A systems model of training for athletic
        performance. Aust J Sports Med 7:57-61.
    Coggan & Allen (2010). Training and Racing with a Power Meter, 2nd ed.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta

from load_engine.models.daily_load import DailyLoad
from load_engine.models.enums import (
    ATL_TIME_CONSTANT_DAYS,
    CTL_TIME_CONSTANT_DAYS,
    CTL_TREND_THRESHOLD,
    CTL_TREND_WINDOW_DAYS,
    Trend,
)
from load_store.exceptions import LoadOrderError

_ONE_DAY = timedelta(days=1)

CTL_DECAY_FACTOR = 1.0 - math.exp(-1.0 / CTL_TIME_CONSTANT_DAYS)
ATL_DECAY_FACTOR = 1.0 - math.exp(-1.0 / ATL_TIME_CONSTANT_DAYS)


def step_load(ctl: float, atl: float, tss: float) -> tuple[float, float]:
    """Apply one day of the recurrence to a (ctl, atl) pair."""
    return (
        ctl + (tss - ctl) * CTL_DECAY_FACTOR,
        atl + (tss - atl) * ATL_DECAY_FACTOR,
    )


def advance_daily_load(
    prior: DailyLoad | None, day: date, total_tss: float
) -> DailyLoad:
    """Advance the PMC state by exactly one calendar day.

    Args:
        prior: Yesterday's state, or None for an athlete with no history
            (cold start: ctl = atl = 0 before *day*'s TSS is applied).
        day: The calendar day being closed. Must be ``prior.day + 1``.
        total_tss: Sum of TSS from all sessions on *day* (0 for rest days).
            Negative or non-finite totals count as 0.

    Returns:
        The DailyLoad for *day*.

    Raises:
        LoadOrderError: If *day* does not immediately follow ``prior.day``.
    """
    if prior is None:
        ctl, atl = 0.0, 0.0
    else:
        expected = prior.day + _ONE_DAY
        if day != expected:
            raise LoadOrderError(
                f"Cannot advance load to {day.isoformat()}: "
                f"next expected day is {expected.isoformat()}"
            )
        ctl, atl = prior.ctl, prior.atl

    tss = float(total_tss or 0.0)
    if not math.isfinite(tss) or tss < 0.0:
        tss = 0.0
    ctl, atl = step_load(ctl, atl, tss)
    return DailyLoad(day=day, ctl=ctl, atl=atl, contributing_tss=tss)


def extend_history(
    prior: DailyLoad | None,
    daily_tss: Mapping[date, float],
    through: date | None = None,
) -> list[DailyLoad]:
    """Continue a history from *prior* through *through*, one day at a time.

    Days missing from *daily_tss* are closed with T = 0. With no *prior*,
    the series starts on the earliest date in *daily_tss*.

    Args:
        prior: Last persisted state, or None for a cold start.
        daily_tss: Per-day TSS totals (dates before ``prior.day + 1`` are
            ignored).
        through: Last day to close. Defaults to the latest date in
            *daily_tss*.

    Returns:
        The new DailyLoad records, oldest first (possibly empty).
    """
    if prior is None:
        if not daily_tss:
            return []
        start = min(daily_tss)
    else:
        start = prior.day + _ONE_DAY

    if through is None:
        if not daily_tss:
            return []
        through = max(daily_tss)

    records: list[DailyLoad] = []
    state = prior
    current = start
    while current <= through:
        state = advance_daily_load(state, current, daily_tss.get(current, 0.0))
        records.append(state)
        current += _ONE_DAY
    return records


def replay_history(
    daily_tss: Mapping[date, float] | Iterable[tuple[date, float]],
    through: date | None = None,
) -> list[DailyLoad]:
    """Rebuild an athlete's full history from cold start.

    A plain fold over ordered (date, tss) pairs; duplicate dates are summed.
    """
    if isinstance(daily_tss, Mapping):
        totals = dict(daily_tss)
    else:
        totals = {}
        for day, tss in daily_tss:
            totals[day] = totals.get(day, 0.0) + tss
    return extend_history(None, totals, through=through)


def decay_only(prior: DailyLoad, days: int) -> DailyLoad:
    """State after *days* consecutive rest days."""
    state = prior
    for _ in range(days):
        state = advance_daily_load(state, state.day + _ONE_DAY, 0.0)
    return state


def ctl_trend(history: Sequence[DailyLoad]) -> Trend:
    """Compare the latest CTL with the value 7 days earlier.

    Uses the latest record on or before (latest - 7 days). STABLE when
    there is no such record or the change is within +/- 2.
    """
    if not history:
        return Trend.STABLE
    latest = history[-1]
    cutoff = latest.day - timedelta(days=CTL_TREND_WINDOW_DAYS)
    earlier = [r for r in history if r.day <= cutoff]
    if not earlier:
        return Trend.STABLE
    diff = latest.ctl - earlier[-1].ctl
    if diff > CTL_TREND_THRESHOLD:
        return Trend.UP
    if diff < -CTL_TREND_THRESHOLD:
        return Trend.DOWN
    return Trend.STABLE
