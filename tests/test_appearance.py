"""Summary: Tests for appearance tokens and clock formatting.

Importance: Keeps contrast, motion, and clock rules stable.
Alternatives: Review the rendered page visually.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from quietquotes.appearance import (
    DARK_TEXT,
    FONT_STACKS,
    LIGHT_TEXT,
    animation_seconds,
    font_stack,
    format_clock,
    format_date,
    luminance,
    noise_frequency,
    resolve_appearance,
)
from quietquotes.preferences import DEFAULT_PREFERENCES


def test_luminance_extremes() -> None:
    assert luminance("#FFFFFF") == pytest.approx(1.0)
    assert luminance("#000000") == 0.0
    assert luminance(None) == 0.0


def test_text_contrast_follows_background() -> None:
    """Summary: Bright first colors switch the text to dark tokens.

    Importance: Keeps the quote readable on any gradient.
    Alternatives: Always use white text.
    """

    default = resolve_appearance(dict(DEFAULT_PREFERENCES))
    assert default.text_primary == LIGHT_TEXT[0]
    assert default.colors == ("#ff5005", "#dbba95", "#d0bce1")
    bright = resolve_appearance({**DEFAULT_PREFERENCES, "color1": "#ffffff"})
    assert bright.text_primary == DARK_TEXT[0]
    assert bright.text_shadow == "none"


def test_noise_and_motion_mappings() -> None:
    assert noise_frequency(13) == pytest.approx(1.02)
    assert noise_frequency(0) == pytest.approx(0.5)
    assert animation_seconds(40) == pytest.approx(38.0)
    assert animation_seconds(100) == 5.0
    appearance = resolve_appearance(dict(DEFAULT_PREFERENCES))
    assert appearance.noise_opacity == pytest.approx(0.4)


def test_unknown_font_falls_back_to_serif() -> None:
    assert font_stack("mono") == FONT_STACKS["mono"]
    assert font_stack("wingdings") == FONT_STACKS["serif"]


def test_twelve_hour_clock_and_date() -> None:
    """Summary: Midnight and noon read as 12 with the right suffix.

    Importance: Guards the usual 12-hour clock edge cases.
    Alternatives: Use a 24-hour clock.
    """

    assert format_clock(datetime(2026, 10, 18, 0, 7)) == "12:07 AM"
    assert format_clock(datetime(2026, 10, 18, 12, 0)) == "12:00 PM"
    assert format_clock(datetime(2026, 10, 18, 14, 5, 9), show_seconds=True) == "2:05:09 PM"
    assert format_date(datetime(2026, 10, 18)) == "Sunday, October 18"
