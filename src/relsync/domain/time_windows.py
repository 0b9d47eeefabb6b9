"""Utilities for constraining telemetry queries to specific time windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

DEFAULT_LOOKBACK = timedelta(hours=6)


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Time window values must include timezone information")
    return value.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class ResolvedWindow:
    """Concrete UTC bounds shared by every query of one run."""

    start: datetime
    end: datetime

    @property
    def start_ms(self) -> int:
        return int(self.start.timestamp() * 1000)

    @property
    def end_ms(self) -> int:
        return int(self.end.timestamp() * 1000)


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Describe the desired temporal bounds for the telemetry queries."""

    start: datetime | None = None
    end: datetime | None = None
    lookback: timedelta | None = DEFAULT_LOOKBACK

    @classmethod
    def trailing(cls, hours: float) -> TimeWindow:
        return cls(lookback=timedelta(hours=hours))

    def resolve(self, *, clock: Clock = _utcnow) -> ResolvedWindow:
        """Resolve the window into concrete UTC timestamps.

        The end defaults to ``clock()``. With both a start and a lookback the later
        of the two starts wins.
        """

        resolved_end = _to_utc(self.end if self.end is not None else clock())
        resolved_start = _to_utc(self.start) if self.start is not None else None

        if self.lookback is not None:
            if self.lookback <= timedelta(0):
                raise ValueError("Lookback duration must be positive")
            start_from_lookback = resolved_end - self.lookback
            if resolved_start is None:
                resolved_start = start_from_lookback
            else:
                resolved_start = max(resolved_start, start_from_lookback)

        if resolved_start is None:
            raise ValueError("Time window needs a start or a lookback")
        if resolved_start >= resolved_end:
            raise ValueError("Time window start must be before end")

        return ResolvedWindow(start=resolved_start, end=resolved_end)


__all__ = ["DEFAULT_LOOKBACK", "Clock", "ResolvedWindow", "TimeWindow"]
