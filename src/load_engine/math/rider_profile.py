"""Rider power-profile classification.

Scores the power-duration curve (in W/kg) against four archetypes with
fixed threshold rules, then extracts strengths and limiters relative to
per-duration benchmarks.

Ties at the top score resolve by the fixed order sprinter > pursuiter >
climber > tt_specialist.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from load_engine.models.enums import (
    BENCHMARK_1MIN_WKG,
    BENCHMARK_5MIN_WKG,
    BENCHMARK_5S_WKG,
    BENCHMARK_20MIN_WKG,
    CLIMB_5MIN_WKG_ELITE,
    CLIMB_5MIN_WKG_GOOD,
    CLIMB_20MIN_WKG,
    LIMITER_MARGIN,
    MIN_ARCHETYPE_SCORE,
    PURSUIT_WKG_ELITE,
    PURSUIT_WKG_GOOD,
    RULE_INCREMENT,
    SPRINT_TO_FTP_RATIO,
    SPRINT_WKG_ELITE,
    SPRINT_WKG_GOOD,
    STRENGTH_MARGIN,
    TT_20MIN_WKG_ELITE,
    TT_20MIN_WKG_GOOD,
    TT_COMBINED_INCREMENT,
    RiderType,
)
from load_engine.models.rider_profile import (
    ArchetypeScores,
    PowerCurvePoint,
    RiderProfile,
)

_TIE_BREAK_ORDER = (
    RiderType.SPRINTER,
    RiderType.PURSUITER,
    RiderType.CLIMBER,
    RiderType.TT_SPECIALIST,
)

LABEL_NEUROMUSCULAR = "Neuromuscular (5s)"
LABEL_ANAEROBIC = "Anaerobic (1min)"
LABEL_VO2MAX = "VO2max (5min)"
LABEL_THRESHOLD = "Threshold (20min)"


def _curve_lookup(
    power_curve: Mapping[int, float] | Iterable[PowerCurvePoint],
) -> dict[int, float]:
    if isinstance(power_curve, Mapping):
        return {int(k): float(v or 0.0) for k, v in power_curve.items()}
    return {p.duration_seconds: float(p.watts or 0.0) for p in power_curve}


def score_archetypes(
    five_sec_wkg: float,
    one_min_wkg: float,
    five_min_wkg: float,
    twenty_min_wkg: float,
    sprint_ratio: float | None,
) -> ArchetypeScores:
    """Apply the threshold rules; each rule adds a fixed increment."""
    sprinter = 0
    if five_sec_wkg > SPRINT_WKG_GOOD:
        sprinter += RULE_INCREMENT
    if five_sec_wkg > SPRINT_WKG_ELITE:
        sprinter += RULE_INCREMENT
    if sprint_ratio is not None and sprint_ratio > SPRINT_TO_FTP_RATIO:
        sprinter += RULE_INCREMENT

    pursuiter = 0
    if one_min_wkg > PURSUIT_WKG_GOOD:
        pursuiter += RULE_INCREMENT
    if one_min_wkg > PURSUIT_WKG_ELITE:
        pursuiter += RULE_INCREMENT

    climber = 0
    if five_min_wkg > CLIMB_5MIN_WKG_GOOD:
        climber += RULE_INCREMENT
    if five_min_wkg > CLIMB_5MIN_WKG_ELITE:
        climber += RULE_INCREMENT
    if twenty_min_wkg > CLIMB_20MIN_WKG:
        climber += RULE_INCREMENT

    tt_specialist = 0
    if twenty_min_wkg > TT_20MIN_WKG_GOOD:
        tt_specialist += RULE_INCREMENT
    if twenty_min_wkg > TT_20MIN_WKG_ELITE:
        tt_specialist += RULE_INCREMENT
    if five_min_wkg > CLIMB_5MIN_WKG_GOOD and twenty_min_wkg > TT_20MIN_WKG_GOOD:
        tt_specialist += TT_COMBINED_INCREMENT

    return ArchetypeScores(
        sprinter=sprinter,
        pursuiter=pursuiter,
        climber=climber,
        tt_specialist=tt_specialist,
    )


def pick_rider_type(scores: ArchetypeScores) -> RiderType:
    """Top-scoring archetype, or ALL_ROUNDER when the top score is below 4."""
    by_type = scores.as_dict()
    best = max(by_type.values())
    if best < MIN_ARCHETYPE_SCORE:
        return RiderType.ALL_ROUNDER
    for rider_type in _TIE_BREAK_ORDER:
        if by_type[rider_type] == best:
            return rider_type
    return RiderType.ALL_ROUNDER


def classify_rider_profile(
    power_curve: Mapping[int, float] | Iterable[PowerCurvePoint] | None,
    weight_kg: float | None,
) -> RiderProfile | None:
    """Classify a rider from their power-duration curve and body weight.

    Args:
        power_curve: Best watts per duration in seconds. The 5, 60, 300
            and 1200 s points are used; missing points count as 0 W.
        weight_kg: Body weight. Unknown or non-positive weight yields None.

    Returns:
        RiderProfile, or None when the curve has no usable points or the
        weight is unknown.
    """
    if power_curve is None or not weight_kg or weight_kg <= 0:
        return None
    curve = _curve_lookup(power_curve)
    if not any(watts > 0 for watts in curve.values()):
        return None

    five_sec = curve.get(5, 0.0)
    one_min = curve.get(60, 0.0)
    five_min = curve.get(300, 0.0)
    twenty_min = curve.get(1200, 0.0)

    five_sec_wkg = five_sec / weight_kg
    one_min_wkg = one_min / weight_kg
    five_min_wkg = five_min / weight_kg
    twenty_min_wkg = twenty_min / weight_kg
    sprint_ratio = five_sec / twenty_min if five_sec and twenty_min else None

    scores = score_archetypes(
        five_sec_wkg, one_min_wkg, five_min_wkg, twenty_min_wkg, sprint_ratio
    )

    metrics = (
        (LABEL_NEUROMUSCULAR, five_sec_wkg, BENCHMARK_5S_WKG),
        (LABEL_ANAEROBIC, one_min_wkg, BENCHMARK_1MIN_WKG),
        (LABEL_VO2MAX, five_min_wkg, BENCHMARK_5MIN_WKG),
        (LABEL_THRESHOLD, twenty_min_wkg, BENCHMARK_20MIN_WKG),
    )
    strengths = tuple(
        label for label, value, benchmark in metrics if value >= benchmark * STRENGTH_MARGIN
    )
    limiters = tuple(
        label
        for label, value, benchmark in metrics
        if 0 < value < benchmark * LIMITER_MARGIN
    )

    return RiderProfile(
        rider_type=pick_rider_type(scores),
        scores=scores,
        strengths=strengths,
        limiters=limiters,
    )
