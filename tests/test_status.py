"""Tests for status window text."""
from __future__ import annotations

import datetime

from eye_drops.history import EntryStatus, HistoryEntry, HistoryLog
from eye_drops.status import (NO_HISTORY, NOT_RUNNING, describe_next, format_row,
                              status_text, today_rows)

from conftest import DAY, at


def test_describe_next():
    assert describe_next(datetime.datetime(2026, 10, 19, 8, 0)) == "Next reminder: Oct 19, 08:00"


def test_describe_next_when_stopped():
    assert describe_next(None) == NOT_RUNNING


def test_status_text():
    assert status_text(True) == "Active"
    assert status_text(False) == "Inactive"


def test_today_rows_only_lists_today():
    log = HistoryLog([HistoryEntry(at(21, 0, day=DAY - datetime.timedelta(days=1))),
                      HistoryEntry(at(8, 0), EntryStatus.COMPLETED)])
    rows = today_rows(log, DAY)
    assert [format_row(e) for e in rows] == ["08:00   ✓ Completed"]


def test_today_rows_empty():
    assert today_rows(HistoryLog(), DAY) == []
    assert NO_HISTORY == "No reminders yet today"
