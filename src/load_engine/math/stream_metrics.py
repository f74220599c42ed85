"""Stream metrics: Normalized Power, Intensity Factor, Training Stress Score.

NP = (mean over 30 s rolling averages of power^4)^(1/4)
IF = NP / FTP
TSS = duration_s x NP x IF / (FTP x 3600) x 100

Incomplete recordings must not block the rest of the pipeline, so every
formula degrades to zero instead of raising.

References:
    Coggan, A. (2003). Training and racing using a power meter: an
    introduction. Coggan & Allen (2010), Training and Racing with a Power
    Meter, 2nd ed.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

import numpy as np
import pandas as pd

from load_engine.models.enums import NP_ROLLING_WINDOW_SAMPLES, SECONDS_PER_HOUR
from load_engine.models.samples import (
    FtpHistory,
    PowerSample,
    SessionLoad,
    WorkoutMetrics,
)


def power_values(samples: Sequence[PowerSample]) -> np.ndarray:
    """Power-bearing samples in recording order; gaps are dropped."""
    return np.array(
        [s.power_watts for s in samples if s.power_watts is not None],
        dtype=np.float64,
    )


def calculate_normalized_power(samples: Sequence[PowerSample]) -> int:
    """Normalized Power over the power-bearing samples, in whole watts.

    Uses a 30-sample trailing rolling mean (30 s at 1 Hz). With fewer than
    30 power-bearing samples the 4th-power mean of the raw values is used
    instead: a degraded approximation for short or sparse recordings.

    Returns:
        NP in watts, or 0 when no sample carries power.
    """
    powers = power_values(samples)
    if powers.size == 0:
        return 0

    if powers.size < NP_ROLLING_WINDOW_SAMPLES:
        basis = powers
    else:
        rolling = pd.Series(powers).rolling(window=NP_ROLLING_WINDOW_SAMPLES).mean()
        basis = rolling.dropna().to_numpy(dtype=np.float64)

    fourth_power_mean = float(np.mean(np.power(basis, 4)))
    return int(round(fourth_power_mean ** 0.25))


def calculate_intensity_factor(normalized_power: float, ftp: float | None) -> float:
    """IF = NP / FTP rounded to 2 decimals; 0.0 when either is missing."""
    if not normalized_power or not ftp or ftp <= 0:
        return 0.0
    return round(normalized_power / ftp, 2)


def calculate_tss(
    normalized_power: float,
    duration_seconds: float,
    ftp: float | None,
) -> int:
    """Training Stress Score for one session.

    The intensity factor is taken unrounded so TSS does not inherit the
    2-decimal display rounding of IF.

    Returns:
        Whole-number TSS; 0 if NP, duration or FTP is missing or zero.
    """
    if not normalized_power or not duration_seconds or not ftp or ftp <= 0:
        return 0
    intensity_factor = normalized_power / ftp
    tss = (duration_seconds * normalized_power * intensity_factor) / (
        ftp * SECONDS_PER_HOUR
    ) * 100
    return int(round(tss))


def infer_duration_seconds(samples: Sequence[PowerSample]) -> float:
    """Recording duration from timestamps: span plus one sampling interval.

    The interval is the median gap between consecutive samples, so a
    3600-sample ride at 1 Hz lasts 3600 s. A single sample counts as 1 s.
    """
    if not samples:
        return 0.0
    if len(samples) == 1:
        return 1.0
    stamps = np.array(
        [s.timestamp.timestamp() for s in samples], dtype=np.float64
    )
    deltas = np.diff(stamps)
    interval = float(np.median(deltas)) if deltas.size else 1.0
    span = float(stamps[-1] - stamps[0])
    return max(span + interval, 0.0)


def compute_workout_metrics(
    samples: Sequence[PowerSample],
    ftp: int | None,
    duration_seconds: float | None = None,
) -> WorkoutMetrics:
    """Derive NP, IF and TSS for one session.

    Args:
        samples: Ordered stream; may be empty or contain power gaps.
        ftp: FTP valid on the ride date (watts). None or 0 yields zero IF/TSS.
        duration_seconds: Moving/timer time if known; otherwise inferred
            from the sample timestamps.

    Returns:
        WorkoutMetrics. Never raises for degenerate input.
    """
    if duration_seconds is None:
        duration_seconds = infer_duration_seconds(samples)

    powers = power_values(samples)
    if powers.size == 0:
        return WorkoutMetrics.zero(duration_seconds=duration_seconds)

    normalized_power = calculate_normalized_power(samples)
    heart_rates = [s.heart_rate for s in samples if s.heart_rate is not None]

    return WorkoutMetrics(
        normalized_power=normalized_power,
        intensity_factor=calculate_intensity_factor(normalized_power, ftp),
        tss=calculate_tss(normalized_power, duration_seconds, ftp),
        duration_seconds=duration_seconds,
        average_power=int(round(float(np.mean(powers)))),
        max_power=int(round(float(np.max(powers)))),
        average_heart_rate=(
            int(round(float(np.mean(heart_rates)))) if heart_rates else None
        ),
    )


def compute_session_metrics(
    samples: Sequence[PowerSample],
    ftp_history: FtpHistory,
    ride_date: date,
    duration_seconds: float | None = None,
) -> WorkoutMetrics:
    """compute_workout_metrics() using the FTP valid on *ride_date*."""
    return compute_workout_metrics(
        samples, ftp_history.ftp_on(ride_date), duration_seconds=duration_seconds
    )


def daily_tss_totals(sessions: Iterable[SessionLoad]) -> dict[date, float]:
    """Sum session TSS per calendar day, ordered by date."""
    totals: dict[date, float] = {}
    for session in sessions:
        totals[session.session_date] = totals.get(session.session_date, 0.0) + (
            session.tss or 0.0
        )
    return dict(sorted(totals.items()))
