"""Mean-maximal power curve from a workout stream, and power-best bookkeeping."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

import pandas as pd

from load_engine.math.stream_metrics import power_values
from load_engine.models.enums import STANDARD_DURATIONS
from load_engine.models.rider_profile import PowerCurvePoint
from load_engine.models.samples import PowerSample


def best_power_curve(
    samples: Sequence[PowerSample],
    durations: Iterable[int] = STANDARD_DURATIONS,
    recorded_date: date | None = None,
    session_id: str | None = None,
) -> tuple[PowerCurvePoint, ...]:
    """Best rolling-average power for each duration (samples assumed 1 Hz).

    Power gaps are dropped as in Normalized Power. Durations longer than
    the available power data are omitted.
    """
    powers = pd.Series(power_values(samples))
    points: list[PowerCurvePoint] = []
    for duration in sorted(durations):
        if duration <= 0 or duration > len(powers):
            continue
        best = powers.rolling(window=duration).mean().max()
        points.append(
            PowerCurvePoint(
                duration_seconds=duration,
                watts=float(round(best)),
                recorded_date=recorded_date,
                session_id=session_id,
            )
        )
    return tuple(points)


def merge_power_bests(
    current: Iterable[PowerCurvePoint],
    candidates: Iterable[PowerCurvePoint],
) -> tuple[PowerCurvePoint, ...]:
    """Keep the best watts per duration.

    A candidate replaces the current best only when strictly higher.

    Returns:
        Points sorted by duration.
    """
    bests = {p.duration_seconds: p for p in current}
    for point in candidates:
        existing = bests.get(point.duration_seconds)
        if existing is None or point.watts > existing.watts:
            bests[point.duration_seconds] = point
    return tuple(bests[d] for d in sorted(bests))
