"""Raw workout stream samples, derived workout metrics and FTP history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class PowerSample:
    """One recording interval of a workout stream (nominally 1 Hz).

    Any channel may be missing; a missing ``power_watts`` is a power gap,
    not a time gap.
    """

    timestamp: datetime
    power_watts: float | None = None
    heart_rate: int | None = None
    cadence: int | None = None
    speed: float | None = None  # m/s


@dataclass(frozen=True)
class WorkoutMetrics:
    """Standardised load metrics for one session.

    Always derived from a stream and the FTP valid on the ride date;
    never edited by hand.
    """

    normalized_power: int
    intensity_factor: float
    tss: int
    duration_seconds: float
    average_power: int = 0
    max_power: int = 0
    average_heart_rate: int | None = None

    @classmethod
    def zero(cls, duration_seconds: float = 0.0) -> WorkoutMetrics:
        """Metrics for a session with no usable power data."""
        return cls(
            normalized_power=0,
            intensity_factor=0.0,
            tss=0,
            duration_seconds=duration_seconds,
        )


@dataclass(frozen=True)
class SessionLoad:
    """Training stress of one completed session, keyed by its calendar day."""

    session_date: date
    tss: float
    session_id: str | None = None


@dataclass(frozen=True)
class FtpEntry:
    """An FTP value that became valid on ``effective_date``."""

    effective_date: date
    ftp_watts: int


@dataclass(frozen=True)
class FtpHistory:
    """Historical FTP values for one athlete.

    TSS and IF must be computed against the FTP valid at ride time, so
    callers look the value up by date instead of reading a "current" FTP.
    Use ``from_entries()`` to build from unsorted inputs.
    """

    entries: tuple[FtpEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_entries(cls, *entries: FtpEntry) -> FtpHistory:
        """Create an FtpHistory with entries sorted by effective date."""
        return cls(entries=tuple(sorted(entries, key=lambda e: e.effective_date)))

    @property
    def is_empty(self) -> bool:
        return len(self.entries) == 0

    def ftp_on(self, on_date: date) -> int | None:
        """FTP valid on *on_date*.

        Returns the most recent entry on or before the date. A ride before
        the first recorded test uses the earliest known value. None when
        the history is empty.
        """
        if not self.entries:
            return None
        valid = self.entries[0].ftp_watts
        for entry in self.entries:
            if entry.effective_date > on_date:
                break
            valid = entry.ftp_watts
        return valid
