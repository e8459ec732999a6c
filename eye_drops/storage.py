"""
Persistence for settings, scheduler state and reminder history.

Each is stored as its own JSON file in the user's home directory (or
``data_dir``). Anything unreadable is treated as missing, so a corrupt
file never stops the app from starting.
"""
from __future__ import annotations

import datetime
import json
import os
from typing import Any, Optional, Protocol

from loguru import logger

from eye_drops.history import EntryStatus, HistoryEntry
from eye_drops.reminder import INACTIVE, Activation, SchedulerState
from eye_drops.window import WindowConfig

# ─── Files ───────────────────────────────────────────────────
DATA_DIR    = os.path.expanduser("~")
CONFIG_NAME = "eye_drops_config.json"
STATE_NAME  = "eye_drops_state.json"
HISTORY_NAME = "eye_drops_history.json"

_DECODE_ERRORS = (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError)


class PersistenceAdapter(Protocol):
    def load_config(self) -> Optional[WindowConfig]: ...
    def save_config(self, config: WindowConfig) -> None: ...
    def load_state(self) -> Optional[SchedulerState]: ...
    def save_state(self, state: SchedulerState) -> None: ...
    def load_history(self) -> list[HistoryEntry]: ...
    def save_history(self, entries: list[HistoryEntry]) -> None: ...


# ─── Encoding ────────────────────────────────────────────────
def config_to_dict(config: WindowConfig) -> dict[str, Any]:
    return {
        "start_time": config.start_time,
        "end_time": config.end_time,
        "interval": config.interval_minutes,
        "sound_enabled": config.sound_enabled,
    }


def config_from_dict(data: dict[str, Any]) -> WindowConfig:
    return WindowConfig.from_times(data["start_time"], data["end_time"],
                                   data["interval"], data["sound_enabled"])


def parse_local_time(value: str) -> datetime.datetime:
    """ISO timestamp in naive local time. Raises ValueError for offset-carrying values."""
    moment = datetime.datetime.fromisoformat(value)
    if moment.tzinfo is not None:
        raise ValueError(f"Expected local time without offset, got {value!r}")
    return moment


def state_to_dict(state: SchedulerState) -> dict[str, Any]:
    nxt = state.next_trigger
    return {
        "active": state.active,
        "next_reminder_time": nxt.isoformat() if nxt else None,
    }


def state_from_dict(data: dict[str, Any]) -> SchedulerState:
    if not data["active"]:
        return INACTIVE
    nxt = parse_local_time(data["next_reminder_time"])
    return SchedulerState(Activation.ACTIVE, nxt)


def entry_to_dict(entry: HistoryEntry) -> dict[str, str]:
    return {"time": entry.timestamp.isoformat(), "status": entry.status.value}


def entry_from_dict(data: dict[str, str]) -> HistoryEntry:
    return HistoryEntry(parse_local_time(data["time"]),
                        EntryStatus(data["status"]))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class JsonFileStore:
    """PersistenceAdapter backed by three JSON files."""

    def __init__(self, data_dir: str = DATA_DIR):
        self.data_dir = data_dir
        self.config_file = os.path.join(data_dir, CONFIG_NAME)
        self.state_file = os.path.join(data_dir, STATE_NAME)
        self.history_file = os.path.join(data_dir, HISTORY_NAME)

    def _read(self, path: str) -> Any:
        if not os.path.exists(path):
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("Could not read {}: {}. Using defaults.", path, e)
            return None

    def _write(self, path: str, data: Any) -> None:
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except (IOError, OSError) as e:
            logger.error("Save error for {}: {}", path, e)

    # ─── Config ──────────────────────────────────────────────
    def load_config(self) -> Optional[WindowConfig]:
        data = self._read(self.config_file)
        if data is None:
            return None
        try:
            return config_from_dict(data)
        except _DECODE_ERRORS as e:
            logger.warning("Invalid settings in {}: {}. Using defaults.", self.config_file, e)
            return None

    def save_config(self, config: WindowConfig) -> None:
        self._write(self.config_file, config_to_dict(config))

    # ─── State ───────────────────────────────────────────────
    def load_state(self) -> Optional[SchedulerState]:
        data = self._read(self.state_file)
        if data is None:
            return None
        try:
            return state_from_dict(data)
        except _DECODE_ERRORS as e:
            logger.warning("Invalid state in {}: {}", self.state_file, e)
            return None

    def save_state(self, state: SchedulerState) -> None:
        self._write(self.state_file, state_to_dict(state))

    # ─── History ─────────────────────────────────────────────
    def load_history(self) -> list[HistoryEntry]:
        data = self._read(self.history_file)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("History in {} is not a list, starting empty", self.history_file)
            return []
        entries = []
        for item in data:
            try:
                entries.append(entry_from_dict(item))
            except _DECODE_ERRORS as e:
                logger.warning("Skipping bad history record {!r}: {}", item, e)
        entries.sort(key=lambda e: e.timestamp)
        return entries

    def save_history(self, entries: list[HistoryEntry]) -> None:
        self._write(self.history_file, [entry_to_dict(e) for e in entries])
