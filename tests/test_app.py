"""Tests for the GUI actions that drive the state machine."""
from __future__ import annotations

from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")

from eye_drops.app import EyeDropsApp, PopupPresenter  # noqa: E402
from eye_drops.history import EntryStatus  # noqa: E402

from conftest import at  # noqa: E402


@pytest.fixture
def app(machine):
    return SimpleNamespace(machine=machine)


class TestActionsUseMachineClock:

    def test_start(self, app, machine, clock):
        clock.now = at(9, 15)
        EyeDropsApp._start(app)
        assert machine.next_trigger == at(10, 15)

    def test_test_reminder(self, app, clock, presenter):
        clock.now = at(12, 0)
        EyeDropsApp._test(app)
        assert [e.timestamp for e in presenter.shown] == [at(12, 0)]

    def test_popup_snooze(self, app, machine, clock):
        EyeDropsApp._start(app)
        entry = machine.poll(at(8, 0))
        clock.now = at(8, 2)
        PopupPresenter(app)._snooze()
        assert entry.status is EntryStatus.SNOOZED
        assert machine.next_trigger == at(8, 7)
