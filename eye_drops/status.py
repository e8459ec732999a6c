"""Text shown in the status window and tray tooltip."""
from __future__ import annotations

import datetime
from typing import Optional

from eye_drops.history import HistoryEntry, HistoryLog

NO_HISTORY = "No reminders yet today"
NOT_RUNNING = "Start reminders to see next alert"


def describe_next(instant: Optional[datetime.datetime]) -> str:
    """'Next reminder: Oct 19, 08:00', or a hint when nothing is scheduled."""
    if instant is None:
        return NOT_RUNNING
    return f"Next reminder: {instant:%b} {instant.day}, {instant:%H:%M}"


def status_text(active: bool) -> str:
    return "Active" if active else "Inactive"


def today_rows(history: HistoryLog, today: datetime.date) -> list[HistoryEntry]:
    return list(history.entries_for_day(today))


def format_row(entry: HistoryEntry) -> str:
    return f"{entry.time_string}   {entry.status.label}"
