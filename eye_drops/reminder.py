"""
Reminder state machine.

Drives the poll/trigger/snooze/acknowledge lifecycle. Everything runs on
the host's single event-loop thread: the poll is a cooperative periodic
callback and user actions arrive as callbacks on the same thread, so no
locking is needed.

Known limitation: the wall clock is trusted. If system time moves
backward, the next trigger can be delayed by the size of the jump.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol

from loguru import logger

from eye_drops.history import EntryStatus, HistoryEntry, HistoryLog
from eye_drops.window import DEFAULT_WINDOW, WindowConfig, compute_next

if TYPE_CHECKING:
    from eye_drops.storage import PersistenceAdapter

SNOOZE_MINUTES = 5
POLL_SECONDS = 60

Clock = Callable[[], datetime.datetime]


class Activation(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


@dataclass(frozen=True)
class SchedulerState:
    activation: Activation = Activation.INACTIVE
    next_trigger: Optional[datetime.datetime] = None

    def __post_init__(self) -> None:
        if (self.activation is Activation.ACTIVE) != (self.next_trigger is not None):
            raise ValueError("next_trigger must be set exactly when active")

    @property
    def active(self) -> bool:
        return self.activation is Activation.ACTIVE


INACTIVE = SchedulerState()


# ─── Collaborators ───────────────────────────────────────────
class AlertPresenter(Protocol):
    def present(self, entry: HistoryEntry) -> None: ...


class PollTimer(Protocol):
    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> Any: ...
    def cancel(self, handle: Any) -> None: ...


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class ReminderStateMachine:

    def __init__(self, store: PersistenceAdapter, presenter: AlertPresenter, *,
                 config: WindowConfig = DEFAULT_WINDOW,
                 history: Optional[HistoryLog] = None,
                 timer: Optional[PollTimer] = None,
                 clock: Clock = datetime.datetime.now,
                 poll_seconds: float = POLL_SECONDS):
        self.store = store
        self.presenter = presenter
        self.config = config
        self.history = history if history is not None else HistoryLog()
        self.timer = timer
        self.clock = clock
        self.poll_seconds = poll_seconds
        self.state = INACTIVE
        self._timer_handle: Any = None
        self._listeners: list[Callable[[], None]] = []

    @classmethod
    def load(cls, store: PersistenceAdapter, presenter: AlertPresenter, now: datetime.datetime,
             **kwargs: Any) -> ReminderStateMachine:
        """Build a machine from persisted data, resuming a schedule still in the future."""
        config = store.load_config() or DEFAULT_WINDOW
        history = HistoryLog(store.load_history())
        machine = cls(store, presenter, config=config, history=history, **kwargs)

        saved = store.load_state()
        if saved is not None and saved.active:
            if saved.next_trigger > now:
                logger.info("Resuming reminders, next at {}", saved.next_trigger)
                machine.state = saved
                machine._arm()
            else:
                logger.info("Discarding past-due reminder from {}", saved.next_trigger)
        return machine

    # ━━━ Properties ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    @property
    def active(self) -> bool:
        return self.state.active

    @property
    def next_trigger(self) -> Optional[datetime.datetime]:
        return self.state.next_trigger

    # ━━━ Lifecycle ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def start(self, now: datetime.datetime) -> None:
        if self.active:
            return
        self.state = SchedulerState(Activation.ACTIVE, compute_next(now, self.config))
        logger.info("Reminders started, next at {}", self.state.next_trigger)
        self.store.save_state(self.state)
        self._arm()
        self._changed()

    def stop(self) -> None:
        self._disarm()
        self.state = INACTIVE
        logger.info("Reminders stopped")
        self.store.save_state(self.state)
        self._changed()

    def poll(self, now: datetime.datetime) -> Optional[HistoryEntry]:
        """Fire the reminder if it is due. Returns the new entry, or None."""
        if not self.active:
            return None
        if now < self.state.next_trigger:
            return None

        entry = self._fire(now)
        self.state = SchedulerState(Activation.ACTIVE, compute_next(now, self.config))
        logger.debug("Next reminder at {}", self.state.next_trigger)
        self.store.save_state(self.state)
        self._changed()
        return entry

    def test_reminder(self, now: datetime.datetime) -> HistoryEntry:
        """Fire a reminder right away without touching the schedule."""
        entry = self._fire(now)
        self._changed()
        return entry

    def _fire(self, now: datetime.datetime) -> HistoryEntry:
        entry = HistoryEntry(now, EntryStatus.PENDING)
        self.history.append(entry)
        self.store.save_history(list(self.history))
        logger.info("Reminder fired at {}", entry.time_string)
        self.presenter.present(entry)
        return entry

    # ━━━ User responses ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def acknowledge(self) -> Optional[HistoryEntry]:
        entry = self.history.mark_latest_pending(EntryStatus.COMPLETED)
        if entry is None:
            return None
        logger.info("Reminder from {} completed", entry.time_string)
        self.store.save_history(list(self.history))
        self._changed()
        return entry

    def snooze(self, now: datetime.datetime) -> Optional[HistoryEntry]:
        entry = self.history.mark_latest_pending(EntryStatus.SNOOZED)
        if entry is not None:
            self.store.save_history(list(self.history))
        if self.active:
            # Snooze may land outside the window
            self.state = SchedulerState(
                Activation.ACTIVE, now + datetime.timedelta(minutes=SNOOZE_MINUTES))
            logger.info("Snoozed until {}", self.state.next_trigger)
            self.store.save_state(self.state)
        self._changed()
        return entry

    # ━━━ Settings & history ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def config_changed(self, config: WindowConfig) -> None:
        """Swap in new settings. The pending instant is kept until the next trigger."""
        self.config = config
        self.store.save_config(config)
        self._changed()

    def clear_history(self) -> None:
        self.history.clear()
        logger.info("History cleared")
        self.store.save_history([])
        self._changed()

    def subscribe(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def _changed(self) -> None:
        for callback in list(self._listeners):
            callback()

    # ━━━ Polling ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _arm(self) -> None:
        if self.timer is None or self._timer_handle is not None:
            return
        self._timer_handle = self.timer.schedule(self.poll_seconds, self._tick)

    def _disarm(self) -> None:
        if self.timer is not None and self._timer_handle is not None:
            self.timer.cancel(self._timer_handle)
        self._timer_handle = None

    def _tick(self) -> None:
        self._timer_handle = None
        if not self.active:
            return
        self.poll(self.clock())
        if self.active:
            self._arm()
