"""
Display helpers for the presentation layer.

Pure formatting: icons for OpenWeather condition codes, rounded temperature
labels, a colour theme by temperature, and forecast dates.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

DEFAULT_ICON = "🌡️"

WEATHER_ICONS = {
    "01d": "☀️",
    "01n": "🌙",
    "02d": "⛅",
    "02n": "☁️",
    "03d": "☁️",
    "03n": "☁️",
    "04d": "☁️",
    "04n": "☁️",
    "09d": "🌧️",
    "09n": "🌧️",
    "10d": "🌦️",
    "10n": "🌧️",
    "11d": "⛈️",
    "11n": "⛈️",
    "13d": "❄️",
    "13n": "❄️",
    "50d": "🌫️",
    "50n": "🌫️",
}

WARM_FROM_C = 20
COLD_BELOW_C = 10


def weather_icon(code: str) -> str:
    return WEATHER_ICONS.get(code, DEFAULT_ICON)


def round_half_up(value: float) -> int:
    # round() would give banker's rounding: 22.5 -> 22
    return math.floor(value + 0.5)


def temperature_label(temp: float) -> str:
    """22.4 -> '22°C'"""
    return f"{round_half_up(temp)}°C"


def temperature_theme(temp: float) -> str:
    """'warm' from 20°C, 'cold' below 10°C, 'mild' in between."""
    if temp >= WARM_FROM_C:
        return "warm"
    if temp < COLD_BELOW_C:
        return "cold"
    return "mild"


def forecast_date_label(dt: int) -> str:
    """Unix seconds -> 'Dec 14, 2025' (UTC)."""
    return datetime.fromtimestamp(dt, tz=timezone.utc).strftime("%b %d, %Y")
