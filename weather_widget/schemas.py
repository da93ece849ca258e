"""
Pydantic schemas.

WeatherRecord is what the lists store and what the controller displays.
It is also the JSON shape written to the storage slots, so field names are
part of the persisted format.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WeatherSnapshot(BaseModel):
    """Current conditions for one city (metric units)."""
    model_config = ConfigDict(frozen=True)

    temp: float
    feels_like: float
    humidity: int
    wind_speed: float
    wind_deg: int
    icon: str = ""
    description: str = ""

    @classmethod
    def from_provider(cls, payload: Dict[str, Any]) -> "WeatherSnapshot":
        """
        Normalize an OpenWeather /data/2.5/weather body:
            {main: {temp, feels_like, humidity},
             weather: [{description, icon}],
             wind: {speed, deg}}
        """
        main = payload["main"]
        wind = payload.get("wind") or {}
        condition = (payload.get("weather") or [{}])[0]
        return cls(
            temp=main["temp"],
            feels_like=main["feels_like"],
            humidity=main["humidity"],
            wind_speed=wind.get("speed", 0.0),
            wind_deg=wind.get("deg", 0),
            icon=condition.get("icon", ""),
            description=condition.get("description", ""),
        )


class ForecastEntry(BaseModel):
    """One 3-hour forecast step."""
    model_config = ConfigDict(frozen=True)

    dt: int
    temp: float
    icon: str = ""

    @classmethod
    def from_provider(cls, item: Dict[str, Any]) -> "ForecastEntry":
        condition = (item.get("weather") or [{}])[0]
        return cls(dt=item["dt"], temp=item["main"]["temp"], icon=condition.get("icon", ""))


class WeatherRecord(BaseModel):
    """
    One city's snapshot as stored in History/Favorites.

    `name` is the search term exactly as submitted; it identifies the record
    for selection and removal but is not unique within a list.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    weather: WeatherSnapshot
    forecast: Optional[List[ForecastEntry]] = None


class SearchRequest(BaseModel):
    """Confirmed search. The term is passed through untouched."""
    term: Optional[str] = None


class SelectRequest(BaseModel):
    """Pick a stored record by name."""
    name: str = Field(..., description="Name of the stored record to display")
