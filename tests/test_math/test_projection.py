"""Tests for forward PMC projection over planned load."""

from __future__ import annotations

import dataclasses
from datetime import date, timedelta

import pytest

from load_engine.math.projection import (
    event_day_projections,
    planned_load_for_day,
    project_forward,
    projected_on,
    projection_summary,
    race_form_status,
)
from load_engine.math.training_load import decay_only, extend_history
from load_engine.models.enums import DayStatus, EventPriority, FormStatus
from load_engine.models.event import Event, EventCalendar
from load_engine.models.plan import PlanDay


def _plan_day(day: date, tss: float, **changes) -> PlanDay:
    return PlanDay(
        day_id=f"p:{day.isoformat()}:{tss}",
        plan_id="p",
        day=day,
        week_number=1,
        target_tss=tss,
        workout_template_ref="endurance_zone2_90",
        **changes,
    )


class TestPlannedLoad:
    def test_scheduled_uses_target(self) -> None:
        assert planned_load_for_day(_plan_day(date(2026, 3, 2), 80)) == 80.0

    def test_completed_uses_actual(self) -> None:
        day = _plan_day(date(2026, 3, 2), 80, status=DayStatus.COMPLETED, actual_tss=95.0)
        assert planned_load_for_day(day) == 95.0

    def test_completed_without_actual_tss_uses_target(self) -> None:
        day = _plan_day(
            date(2026, 3, 2), 80, status=DayStatus.COMPLETED, actual_duration_minutes=90
        )
        assert planned_load_for_day(day) == 80.0

    @pytest.mark.parametrize("status", [DayStatus.SKIPPED, DayStatus.RESCHEDULED])
    def test_skipped_and_moved_days_contribute_nothing(self, status) -> None:
        assert planned_load_for_day(_plan_day(date(2026, 3, 2), 80, status=status)) == 0.0


class TestProjectForward:
    def test_empty_plan_is_pure_decay(self, fit_athlete_load) -> None:
        series = project_forward(fit_athlete_load, [], [], horizon_days=42)
        decayed = decay_only(fit_athlete_load, 42)
        assert len(series) == 42
        assert series[0].day == fit_athlete_load.day + timedelta(days=1)
        assert series[-1].projected_ctl == decayed.ctl
        assert series[-1].projected_atl == decayed.atl

    def test_matches_history_recurrence(self, fit_athlete_load) -> None:
        start = fit_athlete_load.day + timedelta(days=1)
        tss = {start + timedelta(days=i): float(40 + 10 * (i % 4)) for i in range(14)}
        days = [_plan_day(d, t) for d, t in tss.items()]
        series = project_forward(fit_athlete_load, days, EventCalendar(), 14)
        history = extend_history(fit_athlete_load, tss)
        assert [(p.projected_ctl, p.projected_atl) for p in series] == [
            (r.ctl, r.atl) for r in history
        ]

    def test_same_date_days_are_summed(self, fit_athlete_load) -> None:
        start = fit_athlete_load.day + timedelta(days=1)
        series = project_forward(
            fit_athlete_load, [_plan_day(start, 50), _plan_day(start, 30)], [], 1
        )
        assert series[0].planned_tss == 80.0

    def test_rescheduled_day_excluded_and_flags_set(self, fit_athlete_load) -> None:
        start = fit_athlete_load.day + timedelta(days=1)
        days = [
            _plan_day(start, 60, status=DayStatus.RESCHEDULED),
            _plan_day(start + timedelta(days=1), 70, status=DayStatus.COMPLETED, actual_tss=75.0),
            _plan_day(start + timedelta(days=2), 90, status=DayStatus.SKIPPED),
        ]
        series = project_forward(fit_athlete_load, days, [], 3)
        assert [p.planned_tss for p in series] == [0.0, 75.0, 0.0]
        assert [p.is_completed for p in series] == [False, True, False]
        assert [p.is_skipped for p in series] == [False, False, True]

    def test_event_flagged_with_highest_priority(self, fit_athlete_load) -> None:
        race_day = fit_athlete_load.day + timedelta(days=3)
        events = [
            Event(race_day, EventPriority.C, "Club crit"),
            Event(race_day, EventPriority.A, "Nationals"),
        ]
        series = project_forward(fit_athlete_load, [], events, 5)
        flagged = event_day_projections(series)
        assert [p.day for p in flagged] == [race_day]
        assert flagged[0].event_name == "Nationals"
        assert flagged[0].event_priority == EventPriority.A

    def test_explicit_start_without_history(self) -> None:
        start = date(2026, 3, 2)
        series = project_forward(None, [_plan_day(start, 100)], [], 1, start=start)
        assert round(series[0].projected_ctl, 2) == 2.35

    @pytest.mark.parametrize("horizon", [0, -5])
    def test_non_positive_horizon_is_empty(self, fit_athlete_load, horizon) -> None:
        assert project_forward(fit_athlete_load, [], [], horizon) == []

    def test_no_history_and_no_start_is_empty(self) -> None:
        assert project_forward(None, [], [], 42) == []


class TestRaceForm:
    @pytest.mark.parametrize(
        "tsb, status",
        [
            (5.0, FormStatus.OPTIMAL),
            (15.0, FormStatus.OPTIMAL),
            (25.0, FormStatus.OPTIMAL),
            (4.9, FormStatus.LOW),
            (-20.0, FormStatus.LOW),
            (25.1, FormStatus.HIGH),
        ],
    )
    def test_status_bands(self, tsb, status) -> None:
        assert race_form_status(tsb) == status


class TestSummary:
    def test_summary_of_taper_into_event(self, fit_athlete_load, goal_event) -> None:
        start = fit_athlete_load.day + timedelta(days=1)
        days = [_plan_day(start + timedelta(days=i), 100) for i in range(7)]
        event = dataclasses.replace(goal_event, event_date=start + timedelta(days=20))
        series = project_forward(fit_athlete_load, days, [event], 28)

        summary = projection_summary(series)
        assert summary.total_tss == pytest.approx(700.0)
        assert summary.average_tss == pytest.approx(25.0)
        assert summary.peak_ctl_date == start + timedelta(days=6)
        assert summary.end_ctl == round(series[-1].projected_ctl, 1)
        (event_summary,) = summary.event_summaries
        assert event_summary.name == "Spring Classic"
        assert event_summary.status == race_form_status(event_summary.tsb)

    def test_empty_series(self) -> None:
        summary = projection_summary([])
        assert summary.peak_ctl_date is None
        assert summary.event_summaries == ()

    def test_projected_on(self, fit_athlete_load) -> None:
        series = project_forward(fit_athlete_load, [], [], 10)
        target = fit_athlete_load.day + timedelta(days=4)
        assert projected_on(series, target).day == target
        assert projected_on(series, target + timedelta(days=30)) is None
