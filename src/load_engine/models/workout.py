"""Structured workout models used by plan templates."""

from __future__ import annotations

from dataclasses import dataclass, field

from load_engine.models.enums import WorkoutCategory


@dataclass(frozen=True)
class WorkoutInterval:
    """A repeated work/rest block with intensity bounds in % of FTP."""

    sets: int
    duration_seconds: int
    rest_seconds: int
    intensity_min_pct: float
    intensity_max_pct: float
    notes: str = ""


@dataclass(frozen=True)
class PersonalisedInterval:
    """A WorkoutInterval resolved to watts for one athlete's FTP."""

    sets: int
    duration_seconds: int
    rest_seconds: int
    target_power_min: int
    target_power_max: int


@dataclass(frozen=True)
class WorkoutTemplate:
    """A structured workout from the library.

    Attributes:
        workout_id: Stable reference stored on PlanDay.workout_template_ref.
        tss_range: Typical (min, max) TSS for the session.
        if_range: Typical (min, max) intensity factor.
    """

    workout_id: str
    name: str
    category: WorkoutCategory
    duration_minutes: int
    tss_range: tuple[float, float]
    if_range: tuple[float, float]
    description: str
    warmup_minutes: int = 0
    cooldown_minutes: int = 0
    intervals: tuple[WorkoutInterval, ...] = field(default_factory=tuple)

    @property
    def mid_tss(self) -> float:
        return (self.tss_range[0] + self.tss_range[1]) / 2

    @property
    def target_if(self) -> float:
        return round((self.if_range[0] + self.if_range[1]) / 2, 3)

    def personalise(self, ftp_watts: int | None) -> tuple[PersonalisedInterval, ...]:
        """Resolve interval intensity bounds to watts.

        Returns an empty tuple when FTP is unknown.
        """
        if not ftp_watts:
            return ()
        return tuple(
            PersonalisedInterval(
                sets=iv.sets,
                duration_seconds=iv.duration_seconds,
                rest_seconds=iv.rest_seconds,
                target_power_min=round(ftp_watts * iv.intensity_min_pct / 100),
                target_power_max=round(ftp_watts * iv.intensity_max_pct / 100),
            )
            for iv in self.intervals
        )
