"""
Reminder history: an append-only log of fired reminders.

Only the most recently fired reminder can still be answered. Once a newer
reminder fires, an unanswered older one stays pending for good.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional


class EntryStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    SNOOZED = "snoozed"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    EntryStatus.PENDING: "⏳ Pending",
    EntryStatus.COMPLETED: "✓ Completed",
    EntryStatus.SNOOZED: "⏰ Snoozed",
}


@dataclass
class HistoryEntry:
    timestamp: datetime.datetime
    status: EntryStatus = EntryStatus.PENDING

    @property
    def time_string(self) -> str:
        return self.timestamp.strftime("%H:%M")


class _DayEntries:
    """Entries fired on one calendar day. Re-iterable; filters on each pass."""

    def __init__(self, entries: list[HistoryEntry], day: datetime.date):
        self._entries = entries
        self._day = day

    def __iter__(self) -> Iterator[HistoryEntry]:
        return (e for e in self._entries if e.timestamp.date() == self._day)

    def __bool__(self) -> bool:
        return any(True for _ in self)


class HistoryLog:

    def __init__(self, entries: Iterable[HistoryEntry] = ()):
        self._entries: list[HistoryEntry] = list(entries)
        self._open: Optional[HistoryEntry] = None
        # After a reload only the tail can still be answered
        if self._entries and self._entries[-1].status is EntryStatus.PENDING:
            self._open = self._entries[-1]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    @property
    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[-1] if self._entries else None

    @property
    def pending(self) -> Optional[HistoryEntry]:
        """The entry still awaiting an answer, if any."""
        return self._open

    def append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)
        self._open = entry if entry.status is EntryStatus.PENDING else None

    def mark_latest_pending(self, status: EntryStatus) -> Optional[HistoryEntry]:
        """Close the open entry with ``status``. Returns it, or None if nothing was open."""
        if status is EntryStatus.PENDING:
            raise ValueError("An entry can only move out of pending")
        entry = self._open
        if entry is None:
            return None
        entry.status = status
        self._open = None
        return entry

    def entries_for_day(self, day: datetime.date) -> _DayEntries:
        return _DayEntries(self._entries, day)

    def clear(self) -> None:
        self._entries.clear()
        self._open = None
