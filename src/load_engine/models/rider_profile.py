"""Power-duration curve points and the derived rider profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from load_engine.models.enums import RiderType


@dataclass(frozen=True)
class PowerCurvePoint:
    """Best average power sustained for ``duration_seconds``."""

    duration_seconds: int
    watts: float
    recorded_date: date | None = None
    session_id: str | None = None

    def watts_per_kg(self, weight_kg: float | None) -> float | None:
        if not weight_kg:
            return None
        return round(self.watts / weight_kg, 2)


@dataclass(frozen=True)
class ArchetypeScores:
    """Small non-negative integer scores, one per archetype."""

    sprinter: int = 0
    pursuiter: int = 0
    climber: int = 0
    tt_specialist: int = 0

    def as_dict(self) -> dict[RiderType, int]:
        return {
            RiderType.SPRINTER: self.sprinter,
            RiderType.PURSUITER: self.pursuiter,
            RiderType.CLIMBER: self.climber,
            RiderType.TT_SPECIALIST: self.tt_specialist,
        }


@dataclass(frozen=True)
class RiderProfile:
    """Archetype classification with strengths and limiters.

    Recomputed from the current power curve and body weight; not a
    source of truth.
    """

    rider_type: RiderType
    scores: ArchetypeScores
    strengths: tuple[str, ...] = field(default_factory=tuple)
    limiters: tuple[str, ...] = field(default_factory=tuple)
