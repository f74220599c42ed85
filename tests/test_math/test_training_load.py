"""Tests for the PMC recurrence: CTL, ATL, TSB and history replay."""

from __future__ import annotations

import math
from datetime import date, timedelta

import pytest

from load_engine.math.training_load import (
    ATL_DECAY_FACTOR,
    CTL_DECAY_FACTOR,
    advance_daily_load,
    ctl_trend,
    decay_only,
    extend_history,
    replay_history,
    step_load,
)
from load_engine.models.daily_load import DailyLoad
from load_engine.models.enums import Trend
from load_store.exceptions import ConflictError, LoadOrderError

DAY_ONE = date(2026, 3, 2)


def _days(n: int, start: date = DAY_ONE) -> list[date]:
    return [start + timedelta(days=i) for i in range(n)]


class TestDecayFactors:
    def test_factors_match_time_constants(self) -> None:
        assert CTL_DECAY_FACTOR == pytest.approx(1 - math.exp(-1 / 42))
        assert ATL_DECAY_FACTOR == pytest.approx(1 - math.exp(-1 / 7))

    def test_step_moves_toward_tss(self) -> None:
        ctl, atl = step_load(50.0, 50.0, 100.0)
        assert 50.0 < ctl < atl < 100.0


class TestAdvanceDailyLoad:
    def test_cold_start_single_hour_at_ftp(self) -> None:
        record = advance_daily_load(None, DAY_ONE, 100.0)
        assert record.rounded(2) == (2.35, 13.31, -10.96)
        assert record.contributing_tss == 100.0

    def test_tsb_is_ctl_minus_atl(self, fit_athlete_load) -> None:
        record = advance_daily_load(fit_athlete_load, date(2026, 3, 2), 120.0)
        assert record.tsb == record.ctl - record.atl

    def test_rest_day_decays_both(self, fit_athlete_load) -> None:
        record = advance_daily_load(fit_athlete_load, date(2026, 3, 2), 0.0)
        assert record.ctl < fit_athlete_load.ctl
        assert record.atl < fit_athlete_load.atl

    def test_negative_tss_treated_as_zero(self, fit_athlete_load) -> None:
        rest = advance_daily_load(fit_athlete_load, date(2026, 3, 2), 0.0)
        negative = advance_daily_load(fit_athlete_load, date(2026, 3, 2), -50.0)
        assert negative == rest

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_tss_treated_as_zero(self, fit_athlete_load, bad) -> None:
        rest = advance_daily_load(fit_athlete_load, date(2026, 3, 2), 0.0)
        record = advance_daily_load(fit_athlete_load, date(2026, 3, 2), bad)
        assert record == rest
        following = advance_daily_load(record, date(2026, 3, 3), 80.0)
        assert math.isfinite(following.ctl)
        assert math.isfinite(following.atl)

    @pytest.mark.parametrize("offset", [0, 2, -3])
    def test_out_of_order_day_rejected(self, fit_athlete_load, offset) -> None:
        day = fit_athlete_load.day + timedelta(days=offset)
        with pytest.raises(LoadOrderError):
            advance_daily_load(fit_athlete_load, day, 50.0)

    def test_order_error_is_a_conflict(self, fit_athlete_load) -> None:
        with pytest.raises(ConflictError):
            advance_daily_load(fit_athlete_load, fit_athlete_load.day, 50.0)


class TestDecay:
    def test_42_rest_days_leave_one_over_e(self, fit_athlete_load) -> None:
        after = decay_only(fit_athlete_load, 42)
        assert after.ctl / fit_athlete_load.ctl == pytest.approx(math.exp(-1), rel=1e-9)
        assert after.day == fit_athlete_load.day + timedelta(days=42)

    def test_three_time_constants_drop_below_five_percent(self, fit_athlete_load) -> None:
        after = decay_only(fit_athlete_load, 126)
        assert after.ctl < 0.05 * fit_athlete_load.ctl

    def test_fatigue_clears_faster_than_fitness(self, fit_athlete_load) -> None:
        after = decay_only(fit_athlete_load, 14)
        assert after.tsb > fit_athlete_load.tsb


class TestHistory:
    def test_extend_fills_gaps_with_zero_days(self) -> None:
        first = advance_daily_load(None, DAY_ONE, 80.0)
        records = extend_history(first, {DAY_ONE + timedelta(days=3): 50.0}, through=DAY_ONE + timedelta(days=4))
        assert [r.day for r in records] == _days(4, DAY_ONE + timedelta(days=1))
        assert [r.contributing_tss for r in records] == [0.0, 0.0, 50.0, 0.0]

    def test_extend_ignores_days_already_closed(self) -> None:
        first = advance_daily_load(None, DAY_ONE, 80.0)
        records = extend_history(first, {DAY_ONE: 500.0, DAY_ONE + timedelta(days=1): 40.0})
        assert len(records) == 1
        assert records[0].contributing_tss == 40.0

    def test_extend_with_nothing_to_do(self) -> None:
        assert extend_history(None, {}) == []
        first = advance_daily_load(None, DAY_ONE, 80.0)
        assert extend_history(first, {}, through=DAY_ONE) == []

    def test_resumed_replay_matches_single_pass(self) -> None:
        tss = {day: float((i * 37) % 150) for i, day in enumerate(_days(90))}
        full = replay_history(tss)

        first_half = {d: t for d, t in tss.items() if d < DAY_ONE + timedelta(days=45)}
        resumed = replay_history(first_half)
        resumed += extend_history(resumed[-1], tss)

        assert len(resumed) == len(full) == 90
        assert (resumed[-1].ctl, resumed[-1].atl) == (full[-1].ctl, full[-1].atl)

    def test_replay_pairs_sums_duplicate_dates(self) -> None:
        records = replay_history([(DAY_ONE, 60.0), (DAY_ONE, 40.0)])
        assert records == [advance_daily_load(None, DAY_ONE, 100.0)]

    def test_replay_through_extends_with_rest_days(self) -> None:
        records = replay_history({DAY_ONE: 100.0}, through=DAY_ONE + timedelta(days=6))
        assert len(records) == 7
        assert records[-1].ctl < records[0].ctl


class TestCtlTrend:
    def _history(self, ctls: list[float]) -> list[DailyLoad]:
        return [DailyLoad(day=d, ctl=c, atl=c) for d, c in zip(_days(len(ctls)), ctls)]

    def test_rising(self) -> None:
        assert ctl_trend(self._history([40.0 + i for i in range(10)])) == Trend.UP

    def test_falling(self) -> None:
        assert ctl_trend(self._history([60.0 - i for i in range(10)])) == Trend.DOWN

    def test_within_band_is_stable(self) -> None:
        assert ctl_trend(self._history([50.0 + 0.2 * i for i in range(10)])) == Trend.STABLE

    def test_short_history_is_stable(self) -> None:
        assert ctl_trend(self._history([40.0, 60.0, 80.0])) == Trend.STABLE
        assert ctl_trend([]) == Trend.STABLE
