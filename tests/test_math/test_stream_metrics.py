"""Tests for Normalized Power, Intensity Factor and TSS."""

from __future__ import annotations

from datetime import date

import pytest

from load_engine.math.stream_metrics import (
    calculate_intensity_factor,
    calculate_normalized_power,
    calculate_tss,
    compute_session_metrics,
    compute_workout_metrics,
    daily_tss_totals,
    infer_duration_seconds,
)
from load_engine.models.samples import SessionLoad


class TestNormalizedPower:
    def test_constant_power_equals_power(self, samples_factory) -> None:
        assert calculate_normalized_power(samples_factory([250.0] * 600)) == 250

    def test_variable_power_above_average(self, samples_factory) -> None:
        powers = ([100.0] * 60 + [400.0] * 60) * 10
        np_watts = calculate_normalized_power(samples_factory(powers))
        assert np_watts > 250

    def test_no_power_returns_zero(self, samples_factory) -> None:
        assert calculate_normalized_power(samples_factory([None] * 100)) == 0

    def test_empty_stream_returns_zero(self) -> None:
        assert calculate_normalized_power([]) == 0

    def test_short_stream_uses_fourth_power_mean(self, samples_factory) -> None:
        # ((100^4 + 200^4) / 2) ** 0.25 = 170.7
        assert calculate_normalized_power(samples_factory([100.0, 200.0])) == 171

    def test_power_gaps_are_dropped(self, samples_factory) -> None:
        powers = [250.0] * 30 + [None] * 20 + [250.0] * 30
        assert calculate_normalized_power(samples_factory(powers)) == 250

    def test_raising_one_sample_never_lowers_np(self, samples_factory) -> None:
        powers = [float(150 + (i % 45) * 3) for i in range(300)]
        base = calculate_normalized_power(samples_factory(powers))
        for index in (0, 29, 150, 299):
            bumped = list(powers)
            bumped[index] += 200.0
            assert calculate_normalized_power(samples_factory(bumped)) >= base


class TestIntensityFactor:
    def test_at_threshold(self) -> None:
        assert calculate_intensity_factor(250, 250) == 1.0

    def test_rounded_to_two_decimals(self) -> None:
        assert calculate_intensity_factor(200, 260) == 0.77

    @pytest.mark.parametrize("ftp", [None, 0])
    def test_missing_ftp_gives_zero(self, ftp) -> None:
        assert calculate_intensity_factor(250, ftp) == 0.0


class TestTSS:
    def test_one_hour_at_ftp_is_100(self) -> None:
        assert calculate_tss(250, 3600, 250) == 100

    def test_one_hour_at_80_percent(self) -> None:
        assert calculate_tss(200, 3600, 250) == 64

    def test_strictly_increasing_in_duration(self) -> None:
        values = [calculate_tss(220, seconds, 250) for seconds in (1800, 3600, 5400, 7200)]
        assert values == sorted(values)
        assert len(set(values)) == len(values)

    @pytest.mark.parametrize(
        "np_watts, duration, ftp",
        [(0, 3600, 250), (250, 0, 250), (250, 3600, None), (250, 3600, 0)],
    )
    def test_degenerate_inputs_give_zero(self, np_watts, duration, ftp) -> None:
        assert calculate_tss(np_watts, duration, ftp) == 0


class TestInferDuration:
    def test_one_hz_hour(self, steady_hour) -> None:
        assert infer_duration_seconds(steady_hour) == pytest.approx(3600.0)

    def test_uses_median_interval(self, samples_factory) -> None:
        samples = samples_factory([200.0] * 10, interval_seconds=2.0)
        assert infer_duration_seconds(samples) == pytest.approx(20.0)

    def test_empty_and_single(self, samples_factory) -> None:
        assert infer_duration_seconds([]) == 0.0
        assert infer_duration_seconds(samples_factory([200.0])) == 1.0


class TestComputeWorkoutMetrics:
    def test_steady_hour_at_ftp(self, steady_hour) -> None:
        metrics = compute_workout_metrics(steady_hour, ftp=250)
        assert metrics.normalized_power == 250
        assert metrics.intensity_factor == 1.0
        assert metrics.tss == 100
        assert metrics.duration_seconds == pytest.approx(3600.0)
        assert metrics.average_power == 250
        assert metrics.max_power == 250
        assert metrics.average_heart_rate == 150

    def test_explicit_duration_wins(self, steady_hour) -> None:
        metrics = compute_workout_metrics(steady_hour, ftp=250, duration_seconds=1800)
        assert metrics.tss == 50

    def test_no_power_yields_zero_metrics(self, samples_factory) -> None:
        metrics = compute_workout_metrics(samples_factory([None] * 120), ftp=250)
        assert metrics.normalized_power == 0
        assert metrics.intensity_factor == 0.0
        assert metrics.tss == 0
        assert metrics.duration_seconds == pytest.approx(120.0)

    def test_unknown_ftp_keeps_np(self, steady_hour) -> None:
        metrics = compute_workout_metrics(steady_hour, ftp=None)
        assert metrics.normalized_power == 250
        assert metrics.tss == 0

    def test_session_uses_ftp_valid_on_ride_date(self, samples_factory, ftp_history) -> None:
        samples = samples_factory([240.0] * 3600)
        february = compute_session_metrics(samples, ftp_history, date(2026, 2, 15))
        march = compute_session_metrics(samples, ftp_history, date(2026, 3, 15))
        assert february.tss == 100
        assert march.tss < february.tss


class TestDailyTssTotals:
    def test_sums_same_day_sessions_in_date_order(self) -> None:
        totals = daily_tss_totals(
            [
                SessionLoad(date(2026, 3, 3), 40.0),
                SessionLoad(date(2026, 3, 2), 80.0),
                SessionLoad(date(2026, 3, 3), 25.0),
            ]
        )
        assert list(totals) == [date(2026, 3, 2), date(2026, 3, 3)]
        assert totals[date(2026, 3, 3)] == pytest.approx(65.0)
