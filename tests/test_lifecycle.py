"""Tests for plan-day transitions, compliance, progress and plan activation."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, timedelta
from unittest.mock import patch

import pytest

from load_engine.lifecycle import (
    PlanLifecycleEngine,
    apply_action,
    compliance_score,
    plan_progress,
)
from load_engine.models.enums import DayStatus, PlanStatus, TemplateId
from load_engine.models.plan import Complete, Reschedule, Skip
from load_engine.plans.generator import generate_plan
from load_store.exceptions import InvalidTransitionError, NotFoundError, StoreError


@pytest.fixture
def lifecycle(repository) -> PlanLifecycleEngine:
    return PlanLifecycleEngine(repository)


@pytest.fixture
def key_days(stored_plan):
    _, days = stored_plan
    return [d for d in days if d.is_key_workout]


@pytest.fixture
def second_plan(repository, plan_context):
    plan, days = generate_plan(TemplateId.FTP_BUILD_8WEEK, date(2026, 4, 6), plan_context)
    repository.save_plan(plan)
    repository.save_plan_days(days)
    return plan


class TestComplianceScore:
    @pytest.mark.parametrize(
        "actual, target, expected",
        [(80, 100, 0.8), (100, 100, 1.0), (200, 100, 1.5), (0, 100, 0.0)],
    )
    def test_ratio_capped(self, actual, target, expected) -> None:
        assert compliance_score(actual, target) == pytest.approx(expected)

    @pytest.mark.parametrize("actual, target", [(50, 0), (50, None), (None, 100)])
    def test_unset_without_usable_target(self, actual, target) -> None:
        assert compliance_score(actual, target) is None


class TestDayTransitions:
    def test_complete(self, lifecycle, repository, stored_plan, key_days) -> None:
        plan, _ = stored_plan
        day = key_days[0]
        done = lifecycle.complete_day(day.day_id, actual_tss=day.target_tss * 0.9, notes="Windy")
        assert done.status == DayStatus.COMPLETED
        assert done.compliance_score == pytest.approx(0.9)
        assert done.athlete_notes == "Windy"
        assert repository.get_plan_day(day.day_id) == done
        assert repository.get_plan(plan.plan_id).progress_percent == 8  # 1 of 12

    def test_complete_with_duration_only(self, lifecycle, key_days) -> None:
        done = lifecycle.complete_day(key_days[0].day_id, actual_duration_minutes=75)
        assert done.completed
        assert done.compliance_score is None

    def test_overachievement_capped(self, lifecycle, key_days) -> None:
        day = key_days[0]
        done = lifecycle.complete_day(day.day_id, actual_tss=day.target_tss * 3)
        assert done.compliance_score == 1.5

    def test_complete_rest_day_leaves_compliance_unset(self, lifecycle, stored_plan) -> None:
        _, days = stored_plan
        rest = next(d for d in days if d.is_rest_day)
        done = lifecycle.complete_day(rest.day_id, actual_tss=30)
        assert done.compliance_score is None

    def test_complete_requires_actuals(self, lifecycle, repository, key_days) -> None:
        with pytest.raises(ValueError):
            lifecycle.complete_day(key_days[0].day_id)
        assert repository.get_plan_day(key_days[0].day_id).status == DayStatus.SCHEDULED

    def test_negative_actual_rejected(self, lifecycle, key_days) -> None:
        with pytest.raises(ValueError):
            lifecycle.complete_day(key_days[0].day_id, actual_tss=-5)

    def test_skip(self, lifecycle, key_days) -> None:
        skipped = lifecycle.skip_day(key_days[1].day_id, notes="Sick")
        assert skipped.skipped
        assert not skipped.completed
        assert skipped.actual_tss is None

    @pytest.mark.parametrize(
        "first, second",
        [
            (Complete(actual_tss=50), Complete(actual_tss=60)),
            (Skip(), Complete(actual_tss=60)),
            (Complete(actual_tss=50), Skip()),
            (Skip(), Reschedule(date(2026, 3, 4))),
        ],
    )
    def test_terminal_states_reject_transitions(self, lifecycle, key_days, first, second) -> None:
        day_id = key_days[0].day_id
        lifecycle.apply(day_id, first)
        with pytest.raises(InvalidTransitionError) as exc_info:
            lifecycle.apply(day_id, second)
        assert exc_info.value.current_status in ("completed", "skipped")

    def test_missing_day(self, lifecycle) -> None:
        with pytest.raises(NotFoundError):
            lifecycle.complete_day("no-such-day", actual_tss=50)

    def test_annotate_any_state(self, lifecycle, key_days) -> None:
        day_id = key_days[0].day_id
        lifecycle.complete_day(day_id, actual_tss=40)
        annotated = lifecycle.annotate_day(day_id, "Legs felt heavy")
        assert annotated.athlete_notes == "Legs felt heavy"
        assert annotated.status == DayStatus.COMPLETED

    def test_unknown_action_type(self, key_days) -> None:
        with pytest.raises(TypeError):
            apply_action(key_days[0], "complete")


class TestReschedule:
    def test_moves_workout(self, lifecycle, repository, stored_plan, key_days) -> None:
        plan, _ = stored_plan
        day = key_days[0]
        new_date = day.day + timedelta(days=1)
        original, moved = lifecycle.reschedule_day(day.day_id, new_date)

        assert original.status == DayStatus.RESCHEDULED
        assert original.rescheduled_to == new_date
        assert not original.in_forward_series
        assert moved.status == DayStatus.SCHEDULED
        assert moved.day == new_date
        assert moved.rescheduled_from == day.day
        assert moved.target_tss == day.target_tss
        assert moved.workout_template_ref == day.workout_template_ref
        assert moved.day_id != day.day_id
        assert repository.get_plan_day(moved.day_id) == moved
        assert lifecycle.plan_progress(plan.plan_id).counted == 12

    def test_same_date_rejected(self, lifecycle, key_days) -> None:
        with pytest.raises(ValueError):
            lifecycle.reschedule_day(key_days[0].day_id, key_days[0].day)

    def test_rescheduled_day_cannot_move_again(self, lifecycle, key_days) -> None:
        day = key_days[0]
        _, moved = lifecycle.reschedule_day(day.day_id, day.day + timedelta(days=1))
        with pytest.raises(InvalidTransitionError):
            lifecycle.reschedule_day(day.day_id, day.day + timedelta(days=2))
        again = lifecycle.reschedule_day(moved.day_id, day.day + timedelta(days=2))
        assert again[1].rescheduled_from == moved.day


class TestProgress:
    def test_breakdown(self, lifecycle, stored_plan, key_days) -> None:
        plan, _ = stored_plan
        for day in key_days[:3]:
            lifecycle.complete_day(day.day_id, actual_tss=day.target_tss)
        lifecycle.skip_day(key_days[3].day_id)
        lifecycle.reschedule_day(key_days[4].day_id, key_days[4].day + timedelta(days=1))

        progress = lifecycle.plan_progress(plan.plan_id)
        assert (progress.completed, progress.skipped, progress.rescheduled) == (3, 1, 1)
        assert progress.counted == 12
        assert progress.remaining == 8
        assert progress.percent == 25
        assert lifecycle.recompute_plan_progress(plan.plan_id) == 25

    def test_pure_progress_ignores_rest_days(self, stored_plan) -> None:
        _, days = stored_plan
        assert plan_progress(days).counted == 12
        assert plan_progress([]).percent == 0

    def test_recompute_failure_keeps_transition(
        self, lifecycle, repository, key_days, caplog
    ) -> None:
        day_id = key_days[0].day_id
        with patch.object(repository, "get_plan", side_effect=StoreError("store offline")):
            with caplog.at_level(logging.ERROR, logger="load_engine.lifecycle"):
                done = lifecycle.complete_day(day_id, actual_tss=50)
        assert done.completed
        assert repository.get_plan_day(day_id).completed
        assert "Progress recompute failed" in caplog.text

    def test_missing_plan(self, lifecycle) -> None:
        with pytest.raises(NotFoundError):
            lifecycle.recompute_plan_progress("missing")


class TestActivation:
    def test_activate_draft(self, lifecycle, repository, stored_plan) -> None:
        plan, _ = stored_plan
        result = lifecycle.activate_plan(plan.plan_id)
        assert result.succeeded
        assert not result.already_active
        assert repository.get_plan(plan.plan_id).status == PlanStatus.ACTIVE

    def test_single_active_plan(self, lifecycle, repository, stored_plan, second_plan) -> None:
        plan, _ = stored_plan
        lifecycle.activate_plan(plan.plan_id)
        result = lifecycle.activate_plan(second_plan.plan_id)
        assert result.abandoned_plan_ids == (plan.plan_id,)
        assert repository.get_plan(plan.plan_id).status == PlanStatus.ABANDONED
        assert [p.plan_id for p in repository.active_plans(plan.athlete_id)] == [
            second_plan.plan_id
        ]

    def test_reactivation_is_noop(self, lifecycle, stored_plan) -> None:
        plan, _ = stored_plan
        lifecycle.activate_plan(plan.plan_id)
        result = lifecycle.activate_plan(plan.plan_id)
        assert result.activated
        assert result.already_active
        assert result.abandoned_plan_ids == ()

    def test_repairs_two_active_plans(self, lifecycle, repository, stored_plan, second_plan) -> None:
        plan, _ = stored_plan
        repository.save_plan(dataclasses.replace(plan, status=PlanStatus.ACTIVE))
        repository.save_plan(dataclasses.replace(second_plan, status=PlanStatus.ACTIVE))
        result = lifecycle.activate_plan(second_plan.plan_id)
        assert result.already_active
        assert result.abandoned_plan_ids == (plan.plan_id,)

    def test_failed_first_step_is_reported_and_retryable(
        self, lifecycle, repository, stored_plan, second_plan
    ) -> None:
        plan, _ = stored_plan
        lifecycle.activate_plan(plan.plan_id)
        real_save = repository.save_plan

        def flaky_save(p):
            if p.status == PlanStatus.ABANDONED:
                raise StoreError("write timeout")
            real_save(p)

        with patch.object(repository, "save_plan", side_effect=flaky_save):
            result = lifecycle.activate_plan(second_plan.plan_id)
        assert not result.succeeded
        assert result.failed_plan_ids == (plan.plan_id,)
        assert repository.get_plan(second_plan.plan_id).status == PlanStatus.DRAFT

        retry = lifecycle.activate_plan(second_plan.plan_id)
        assert retry.succeeded
        assert repository.get_plan(plan.plan_id).status == PlanStatus.ABANDONED

    def test_abandoned_plan_cannot_be_activated(self, lifecycle, stored_plan) -> None:
        plan, _ = stored_plan
        lifecycle.abandon_plan(plan.plan_id)
        with pytest.raises(InvalidTransitionError):
            lifecycle.activate_plan(plan.plan_id)

    def test_missing_plan(self, lifecycle) -> None:
        with pytest.raises(NotFoundError):
            lifecycle.activate_plan("missing")


class TestPlanStatus:
    def test_complete_requires_active(self, lifecycle, stored_plan) -> None:
        plan, _ = stored_plan
        with pytest.raises(InvalidTransitionError):
            lifecycle.complete_plan(plan.plan_id)
        lifecycle.activate_plan(plan.plan_id)
        assert lifecycle.complete_plan(plan.plan_id).status == PlanStatus.COMPLETED
        assert lifecycle.complete_plan(plan.plan_id).status == PlanStatus.COMPLETED

    def test_abandon(self, lifecycle, stored_plan) -> None:
        plan, _ = stored_plan
        assert lifecycle.abandon_plan(plan.plan_id).status == PlanStatus.ABANDONED
        assert lifecycle.abandon_plan(plan.plan_id).status == PlanStatus.ABANDONED

    def test_completed_plan_cannot_be_abandoned(self, lifecycle, stored_plan) -> None:
        plan, _ = stored_plan
        lifecycle.activate_plan(plan.plan_id)
        lifecycle.complete_plan(plan.plan_id)
        with pytest.raises(InvalidTransitionError):
            lifecycle.abandon_plan(plan.plan_id)
