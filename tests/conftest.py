import httpx
import pytest

from weather_widget.db import make_engine, make_session_factory
from weather_widget.schemas import ForecastEntry, WeatherRecord, WeatherSnapshot
from weather_widget.settings import Settings
from weather_widget.storage import InMemoryKeyValueStore, SqlKeyValueStore
from weather_widget.weather_clients import WeatherFetcher


def current_payload(temp=22.4, feels_like=21.6, icon="01d", description="clear sky"):
    return {
        "main": {"temp": temp, "feels_like": feels_like, "humidity": 40},
        "weather": [{"description": description, "icon": icon}],
        "wind": {"speed": 3.6, "deg": 250},
    }


def forecast_payload(count=8, start_dt=1700000000):
    return {
        "list": [
            {"dt": start_dt + i * 10800, "main": {"temp": 15.0 + i}, "weather": [{"icon": "02d"}]}
            for i in range(count)
        ]
    }


def make_record(name, temp=10.0):
    return WeatherRecord(
        name=name,
        weather=WeatherSnapshot(
            temp=temp, feels_like=temp, humidity=50, wind_speed=1.0, wind_deg=90,
            icon="03d", description="scattered clouds",
        ),
        forecast=[ForecastEntry(dt=1700000000, temp=temp, icon="03d")],
    )


class ProviderStub:
    """Fake OpenWeather: records every request and answers per endpoint."""

    def __init__(self, current_status=200, forecast_status=200, current=None, forecast=None):
        self.calls = []
        self.current_status = current_status
        self.forecast_status = forecast_status
        self.current = current if current is not None else current_payload()
        self.forecast = forecast if forecast is not None else forecast_payload()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if request.url.path.endswith("/weather"):
            return httpx.Response(self.current_status, json=self.current if self.current_status == 200 else {"cod": "404", "message": "city not found"})
        if request.url.path.endswith("/forecast"):
            return httpx.Response(self.forecast_status, json=self.forecast if self.forecast_status == 200 else {"cod": "404", "message": "city not found"})
        return httpx.Response(404)

    def transport(self):
        return httpx.MockTransport(self)


@pytest.fixture()
def settings(tmp_path):
    return Settings(openweather_api_key="test-key", sqlite_path=str(tmp_path / "widget.sqlite3"))


@pytest.fixture()
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture()
def sql_store(settings):
    return SqlKeyValueStore(make_session_factory(make_engine(settings.sqlite_path)))


@pytest.fixture()
def provider():
    return ProviderStub()


@pytest.fixture()
def fetcher(settings, provider):
    return WeatherFetcher.from_settings(settings, transport=provider.transport())
