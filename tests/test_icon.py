"""Tests for the drop icon renderer."""
from __future__ import annotations

import pytest

from eye_drops.icon import TEAL, create_drop_icon, generate_icon


@pytest.mark.parametrize("size", [16, 32, 64, 256])
def test_icon_size_and_mode(size):
    img = create_drop_icon(size)
    assert img.size == (size, size)
    assert img.mode == "RGBA"


def test_corners_are_transparent():
    img = create_drop_icon(64)
    assert img.getpixel((0, 0))[3] == 0
    assert img.getpixel((63, 0))[3] == 0


def test_inactive_icon_drops_the_teal():
    active = set(create_drop_icon(64).getdata())
    inactive = set(create_drop_icon(64, inactive=True).getdata())
    assert TEAL in active
    assert TEAL not in inactive


def test_generate_icon_writes_files(tmp_path):
    ico, png = tmp_path / "icon.ico", tmp_path / "icon.png"
    generate_icon(str(ico), str(png))
    assert ico.stat().st_size > 0
    assert png.stat().st_size > 0
