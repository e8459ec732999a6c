"""Tests for the reminder window and next-trigger computation."""
from __future__ import annotations

import datetime

import pytest

from eye_drops.window import (DEFAULT_WINDOW, WindowConfig, compute_next, fmt12,
                              minute_of_day, parse_hhmm)

from conftest import DAY, at

NEXT_DAY = DAY + datetime.timedelta(days=1)


class TestParsing:

    def test_parse_hhmm(self):
        assert parse_hhmm("08:00") == 480
        assert parse_hhmm(" 23:59 ") == 1439

    @pytest.mark.parametrize("bad", ["24:00", "12:60", "noon", "12", ""])
    def test_parse_hhmm_rejects_garbage(self, bad):
        with pytest.raises(ValueError):
            parse_hhmm(bad)

    def test_fmt12(self):
        assert fmt12(0) == "12:00 AM"
        assert fmt12(870) == "2:30 PM"
        assert fmt12(720) == "12:00 PM"


class TestWindowConfig:

    def test_defaults(self):
        assert DEFAULT_WINDOW.start_time == "08:00"
        assert DEFAULT_WINDOW.end_time == "20:00"
        assert DEFAULT_WINDOW.interval_minutes == 60
        assert DEFAULT_WINDOW.sound_enabled is True

    def test_from_times(self):
        cfg = WindowConfig.from_times("09:15", "17:45", 30, False)
        assert (cfg.start_minute, cfg.end_minute) == (555, 1065)
        assert cfg.sound_enabled is False

    def test_window_crossing_midnight_is_rejected(self):
        with pytest.raises(ValueError, match="before"):
            WindowConfig.from_times("22:00", "06:00", 60)

    def test_zero_interval_is_rejected(self):
        with pytest.raises(ValueError):
            WindowConfig(480, 1200, 0)

    def test_out_of_range_minute_is_rejected(self):
        with pytest.raises(ValueError):
            WindowConfig(480, 1440, 60)

    def test_single_minute_window_is_allowed(self):
        cfg = WindowConfig(600, 600, 5)
        assert compute_next(at(9, 0), cfg) == at(10, 0)
        assert compute_next(at(10, 0), cfg) == at(10, 0, day=NEXT_DAY)

    def test_is_immutable(self, config):
        with pytest.raises(AttributeError):
            config.interval_minutes = 5


class TestComputeNext:

    def test_before_window_pins_to_window_open(self, config):
        assert compute_next(at(7, 30), config) == at(8, 0)

    @pytest.mark.parametrize("interval", [1, 15, 60, 600])
    def test_before_window_ignores_interval(self, interval):
        cfg = WindowConfig(480, 1200, interval)
        assert compute_next(at(3, 10), cfg) == at(8, 0)

    def test_inside_window_adds_interval(self, config):
        assert compute_next(at(9, 0), config) == at(10, 0)

    def test_drops_seconds(self, config):
        assert compute_next(at(9, 0, 42), config) == at(10, 0)

    def test_rolls_to_next_day_past_window_end(self, config):
        # 19:30 + 60 = 20:30 > 20:00
        assert compute_next(at(19, 30), config) == at(8, 0, day=NEXT_DAY)

    def test_landing_exactly_on_window_end_stays_today(self, config):
        assert compute_next(at(19, 0), config) == at(20, 0)

    def test_after_window_rolls_to_next_day(self, config):
        assert compute_next(at(23, 59, 59), config) == at(8, 0, day=NEXT_DAY)

    def test_rolls_over_month_end(self, config):
        now = datetime.datetime(2026, 1, 31, 21, 0)
        assert compute_next(now, config) == datetime.datetime(2026, 2, 1, 8, 0)

    @pytest.mark.parametrize("interval", [1, 7, 45, 60, 180])
    def test_result_is_future_and_inside_window(self, interval):
        cfg = WindowConfig(480, 1200, interval)
        now = at(0, 0)
        while now.date() == DAY:
            nxt = compute_next(now, cfg)
            assert nxt > now
            assert cfg.start_minute <= minute_of_day(nxt) <= cfg.end_minute
            assert nxt.second == 0 and nxt.microsecond == 0
            now += datetime.timedelta(minutes=13, seconds=7)
