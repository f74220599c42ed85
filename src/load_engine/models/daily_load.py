"""DailyLoad: one point of an athlete's Performance Management Chart."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyLoad:
    """Fitness/fatigue/form state at the end of one calendar day.

    A day's record depends only on the previous day's record and the total
    TSS ridden on that date. ``tsb`` is derived so that ``tsb == ctl - atl``
    holds for every instance. Values are kept at full float precision;
    rounding is a presentation concern.
    """

    day: date
    ctl: float
    atl: float
    contributing_tss: float = 0.0

    @property
    def tsb(self) -> float:
        return self.ctl - self.atl

    def rounded(self, ndigits: int = 2) -> tuple[float, float, float]:
        """(ctl, atl, tsb) rounded for display."""
        return (
            round(self.ctl, ndigits),
            round(self.atl, ndigits),
            round(self.tsb, ndigits),
        )
