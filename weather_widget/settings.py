from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Widget settings: OpenWeather key and endpoint, list sizes, storage slots.

    Values come from the process environment, then a local .env file.
    create_app() passes one instance down to the fetcher and both lists.
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # No default: Settings() raises when the key is not configured
    openweather_api_key: str

    openweather_base: str = "https://api.openweathermap.org"
    timeout_s: float = 10.0

    # Forecast off reproduces the single-request lookup (current conditions only)
    include_forecast: bool = True
    forecast_entries: int = 5

    max_history: int = 5

    # Storage slot names
    favorites_key: str = "favoriteCities"
    history_key: str = "searchHistory"

    # File holding the favorites and history slots
    sqlite_path: str = "weather_widget.sqlite3"

    app_name: str = "Weather Widget"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, built on first use."""
    return Settings()
