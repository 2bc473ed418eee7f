"""Summary: Appearance and clock helpers for the new tab page.

Importance: Converts stored preferences into concrete visual tokens.
Alternatives: Let a frontend compute styles from raw preferences.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from quietquotes.models import Appearance


FONT_STACKS: dict[str, str] = {
    "serif": '"Playfair Display", Georgia, serif',
    "sans": '"Inter", "Segoe UI", sans-serif',
    "mono": '"Space Mono", "Fira Code", monospace',
    "cormorant": '"Cormorant Garamond", "Garamond", serif',
    "lora": '"Lora", serif',
    "montserrat": '"Montserrat", sans-serif',
    "satisfy": '"Satisfy", cursive',
}

BACKGROUND_TYPES = ("plane", "water", "sphere")

LIGHT_TEXT = ("rgba(255, 255, 255, 0.95)", "rgba(255, 255, 255, 0.7)", "0 4px 12px rgba(0,0,0,0.3)")
DARK_TEXT = ("rgba(17, 24, 39, 0.95)", "rgba(55, 65, 81, 0.8)", "none")

MIN_ANIMATION_SECONDS = 5.0


def font_stack(name: str) -> str:
    return FONT_STACKS.get(name, FONT_STACKS["serif"])


def luminance(hex_color: str | None) -> float:
    """Summary: Compute relative luminance of a #rrggbb color.

    Importance: Picks readable text colors over the user's background.
    Alternatives: Let users choose text colors manually.
    """

    if not hex_color:
        return 0.0
    value = hex_color.lstrip("#")
    channels = [int(value[index:index + 2], 16) / 255 for index in (0, 2, 4)]
    linear = [
        channel / 12.92 if channel <= 0.03928 else ((channel + 0.055) / 1.055) ** 2.4
        for channel in channels
    ]
    return linear[0] * 0.2126 + linear[1] * 0.7152 + linear[2] * 0.0722


def noise_frequency(density: float) -> float:
    # Slider range 0-50 maps onto a 0.5-2.5 turbulence frequency.
    return round(0.5 + (density / 50) * 2.0, 3)


def animation_seconds(speed: float) -> float:
    return max(MIN_ANIMATION_SECONDS, 60 - (speed / 100 * 55))


def resolve_appearance(preferences: dict[str, Any]) -> Appearance:
    """Summary: Build appearance tokens from a preferences mapping.

    Importance: Keeps contrast and motion rules out of any renderer.
    Alternatives: Store computed tokens alongside preferences.
    """

    color1 = preferences["color1"]
    primary, secondary, shadow = DARK_TEXT if luminance(color1) > 0.5 else LIGHT_TEXT
    return Appearance(
        font_stack=font_stack(preferences["fontFamily"]),
        colors=(color1, preferences["color2"], preferences["color3"]),
        bg_type=preferences["bgType"],
        noise_opacity=preferences["noiseStrength"] / 100,
        noise_frequency=noise_frequency(preferences["noiseDensity"]),
        animation_seconds=animation_seconds(preferences["speed"]),
        text_primary=primary,
        text_secondary=secondary,
        text_shadow=shadow,
    )


def format_clock(now: datetime, show_seconds: bool = False) -> str:
    """Summary: Format a 12-hour clock string.

    Importance: Matches the new tab clock, with optional seconds.
    Alternatives: Use the locale's default time format.
    """

    hours = now.hour % 12 or 12
    suffix = "PM" if now.hour >= 12 else "AM"
    text = f"{hours}:{now.minute:02d}"
    if show_seconds:
        text += f":{now.second:02d}"
    return f"{text} {suffix}"


def format_date(now: datetime) -> str:
    return f"{now.strftime('%A')}, {now.strftime('%B')} {now.day}"
