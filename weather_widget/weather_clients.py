"""
Weather clients.

OpenWeatherClient knows the provider's endpoints and status handling.
WeatherFetcher turns a search term into a WeatherRecord and maps every
failure onto the error taxonomy; it never touches the lists.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from .errors import NetworkError, NotFoundError
from .schemas import ForecastEntry, WeatherRecord, WeatherSnapshot
from .settings import Settings

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """
    OpenWeatherMap wrapper.

    Endpoints used:
    - Current weather:
        /data/2.5/weather?q=...&units=metric&appid=KEY
    - 5-day forecast (3-hour increments):
        /data/2.5/forecast?q=...&units=metric&appid=KEY

    Queries are by city name, exactly as typed.
    """

    def __init__(
        self,
        api_key: str,
        timeout_s: float = 10.0,
        base: str = "https://api.openweathermap.org",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.timeout_s = timeout_s
        self.base = base
        self.transport = transport

    def session(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base, timeout=self.timeout_s, transport=self.transport)

    def _params(self, query: str, units: str) -> Dict[str, Any]:
        return {"q": query, "units": units, "appid": self.api_key}

    async def current_weather(self, client: httpx.AsyncClient, query: str, units: str = "metric") -> httpx.Response:
        """Retrieves current weather conditions for a city name."""
        return await client.get("/data/2.5/weather", params=self._params(query, units))

    async def forecast_5day_3h(self, client: httpx.AsyncClient, query: str, units: str = "metric") -> httpx.Response:
        """Retrieves the 5-day forecast in 3-hour increments for a city name."""
        return await client.get("/data/2.5/forecast", params=self._params(query, units))


class WeatherFetcher:
    """
    Builds WeatherRecords from the provider.

    With forecast enabled the two requests run together and both must
    succeed; a failure of either one fails the whole lookup.
    """

    def __init__(self, client: OpenWeatherClient, include_forecast: bool = True, forecast_entries: int = 5):
        self.client = client
        self.include_forecast = include_forecast
        self.forecast_entries = forecast_entries

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "WeatherFetcher":
        client = OpenWeatherClient(
            settings.openweather_api_key,
            timeout_s=settings.timeout_s,
            base=settings.openweather_base,
            transport=transport,
        )
        return cls(client, include_forecast=settings.include_forecast, forecast_entries=settings.forecast_entries)

    async def fetch(self, term: str) -> WeatherRecord:
        """
        Look up `term`.

        Raises:
            NotFoundError: a call returned a non-success status or an unreadable body.
            NetworkError: a call could not be completed.
        """
        async with self.client.session() as session:
            calls = [self.client.current_weather(session, term)]
            if self.include_forecast:
                calls.append(self.client.forecast_5day_3h(session, term))
            responses = await asyncio.gather(*calls, return_exceptions=True)

        for response in responses:
            if isinstance(response, httpx.HTTPError):
                logger.warning("Weather request for %r failed: %s", term, response)
                raise NetworkError(f"Weather request failed: {response}") from response
            if isinstance(response, BaseException):
                raise response

        for response in responses:
            if not response.is_success:
                logger.info("Weather lookup for %r rejected (%s)", term, response.status_code)
                raise NotFoundError(f"Weather lookup failed ({response.status_code}): {response.text}")

        try:
            weather = WeatherSnapshot.from_provider(responses[0].json())
            forecast = None
            if self.include_forecast:
                items = responses[1].json()["list"][: self.forecast_entries]
                forecast = [ForecastEntry.from_provider(item) for item in items]
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Unreadable weather payload for %r: %s", term, e)
            raise NotFoundError(f"Unexpected weather payload: {e}") from e

        return WeatherRecord(name=term, weather=weather, forecast=forecast)
