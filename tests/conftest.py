from __future__ import annotations

import datetime
from typing import Callable, Optional

import pytest

from eye_drops.history import HistoryEntry
from eye_drops.reminder import ReminderStateMachine, SchedulerState
from eye_drops.window import WindowConfig

DAY = datetime.date(2026, 3, 10)


def at(hh: int, mm: int, ss: int = 0, day: datetime.date = DAY) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time(hh, mm, ss))


class MemoryStore:
    """In-memory persistence that records every write."""

    def __init__(self):
        self.config: Optional[WindowConfig] = None
        self.state: Optional[SchedulerState] = None
        self.history: list[HistoryEntry] = []
        self.writes: list[str] = []

    def load_config(self):
        return self.config

    def save_config(self, config):
        self.config = config
        self.writes.append("config")

    def load_state(self):
        return self.state

    def save_state(self, state):
        self.state = state
        self.writes.append("state")

    def load_history(self):
        return [HistoryEntry(e.timestamp, e.status) for e in self.history]

    def save_history(self, entries):
        self.history = [HistoryEntry(e.timestamp, e.status) for e in entries]
        self.writes.append("history")


class RecordingPresenter:
    def __init__(self):
        self.shown: list[HistoryEntry] = []

    def present(self, entry):
        self.shown.append(entry)


class FakeTimer:
    """PollTimer that only fires when the test says so."""

    def __init__(self):
        self._next_id = 0
        self.pending: dict[int, tuple[float, Callable[[], None]]] = {}
        self.cancelled: list[int] = []

    def schedule(self, delay_seconds, callback):
        self._next_id += 1
        self.pending[self._next_id] = (delay_seconds, callback)
        return self._next_id

    def cancel(self, handle):
        self.cancelled.append(handle)
        self.pending.pop(handle, None)

    def fire_all(self):
        due, self.pending = self.pending, {}
        for _, callback in due.values():
            callback()


class ManualClock:
    def __init__(self, now: datetime.datetime):
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now


@pytest.fixture
def config():
    return WindowConfig.from_times("08:00", "20:00", 60, True)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def clock():
    return ManualClock(at(7, 30))


@pytest.fixture
def machine(store, presenter, config, timer, clock):
    return ReminderStateMachine(store, presenter, config=config, timer=timer, clock=clock)
