"""
Daily reminder window and next-trigger computation.

A window is a span of minutes-of-day (e.g. 08:00-20:00) inside which
reminders may fire. ``compute_next`` is pure: same inputs, same answer.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass

MINUTES_PER_DAY = 24 * 60


def minute_of_day(moment: datetime.datetime) -> int:
    return moment.hour * 60 + moment.minute


def parse_hhmm(s: str) -> int:
    """Parse time string (HH:MM) to minute-of-day. Raises ValueError if invalid."""
    h, m = str(s).strip().split(":")
    h, m = int(h), int(m)
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"Invalid time: {s!r}")
    return h * 60 + m


def format_hhmm(minute: int) -> str:
    return f"{minute // 60:02d}:{minute % 60:02d}"


def fmt12(minute: int) -> str:
    """Minute-of-day to 12-hour format (e.g., 870 -> '2:30 PM')."""
    h, m = divmod(minute, 60)
    suffix = "AM" if h < 12 else "PM"
    h12 = h % 12
    if h12 == 0:
        h12 = 12
    return f"{h12}:{m:02d} {suffix}"


@dataclass(frozen=True)
class WindowConfig:
    """Reminder settings. Replaced wholesale on edit, never mutated."""
    start_minute: int = 8 * 60
    end_minute: int = 20 * 60
    interval_minutes: int = 60
    sound_enabled: bool = True

    def __post_init__(self) -> None:
        for name in ("start_minute", "end_minute"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not 0 <= value < MINUTES_PER_DAY:
                raise ValueError(f"{name} out of range: {value}")
        if self.end_minute < self.start_minute:
            # Windows crossing midnight (e.g. 22:00-06:00) are not supported
            raise ValueError(
                f"Window end {format_hhmm(self.end_minute)} is before "
                f"start {format_hhmm(self.start_minute)}")
        if isinstance(self.interval_minutes, bool) or not isinstance(self.interval_minutes, int):
            raise ValueError(f"interval_minutes must be an integer, got {self.interval_minutes!r}")
        if self.interval_minutes < 1:
            raise ValueError("Interval must be >= 1 min")
        if not isinstance(self.sound_enabled, bool):
            raise ValueError(f"sound_enabled must be a bool, got {self.sound_enabled!r}")

    @classmethod
    def from_times(cls, start: str, end: str, interval: int,
                   sound_enabled: bool = True) -> WindowConfig:
        return cls(parse_hhmm(start), parse_hhmm(end), interval, sound_enabled)

    @property
    def start_time(self) -> str:
        return format_hhmm(self.start_minute)

    @property
    def end_time(self) -> str:
        return format_hhmm(self.end_minute)


DEFAULT_WINDOW = WindowConfig()


def compute_next(now: datetime.datetime, config: WindowConfig) -> datetime.datetime:
    """Next reminder instant after ``now``, always inside the window.

    Before the window opens the first reminder is pinned to window open
    rather than ``now + interval``. Past the window end it rolls over to
    window open on the next calendar day.
    """
    cur = minute_of_day(now)
    candidate = cur + config.interval_minutes
    if cur < config.start_minute:
        candidate = config.start_minute

    if candidate > config.end_minute:
        day = now.date() + datetime.timedelta(days=1)
        candidate = config.start_minute
    else:
        day = now.date()
    h, m = divmod(candidate, 60)
    return datetime.datetime.combine(day, datetime.time(h, m), tzinfo=now.tzinfo)
