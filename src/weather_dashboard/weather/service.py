"""Weather service normalizing OpenWeather responses into snapshots."""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from weather_dashboard.config import ICON_URL_TEMPLATE
from weather_dashboard.weather.client import MissingApiKeyError, OpenWeatherClient
from weather_dashboard.weather.models import (
    OwmCurrentResponse, WeatherQuery, WeatherSnapshot
)

logger = logging.getLogger(__name__)


class WeatherServiceError(Exception):
    """Base class for weather lookup failures."""
    pass


class WeatherNotFoundError(WeatherServiceError):
    """Raised when the upstream cannot be reached or rejects the lookup."""
    pass


class WeatherDataError(WeatherServiceError):
    """Raised when the upstream body cannot be turned into a snapshot."""
    pass


class WeatherService:
    """Service for fetching current conditions as weather snapshots."""

    def __init__(self, client: OpenWeatherClient):
        """Initialize the weather service.

        Args:
            client: OpenWeather client instance
        """
        self.client = client

    async def get_snapshot(self, query: WeatherQuery) -> WeatherSnapshot:
        """Get current conditions for a city or a pair of coordinates.

        Args:
            query: City name or coordinates

        Returns:
            WeatherSnapshot with current conditions

        Raises:
            ValueError: If the query has neither city nor coordinates
            MissingApiKeyError: If no API key is configured
            WeatherNotFoundError: If the upstream fails or returns non-200
            WeatherDataError: If the upstream body is unusable
        """
        if not self.client.api_key:
            logger.error("Error: API key not set")
            raise MissingApiKeyError("API key not set")

        if query.is_empty:
            raise ValueError("City or coordinates required")

        try:
            if query.has_coordinates:
                response = await self.client.get_current_weather(lat=query.lat, lon=query.lon)
            else:
                response = await self.client.get_current_weather(city=query.city.strip())
        except httpx.RequestError as e:
            logger.error(f"Request error to OpenWeather API: {e}")
            raise WeatherNotFoundError("City not found or API error") from e

        if response.status_code != 200:
            logger.error(f"Error fetching weather: status {response.status_code} - {response.text}")
            raise WeatherNotFoundError("City not found or API error")

        try:
            raw = OwmCurrentResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Error decoding weather data: {e}")
            raise WeatherDataError("Failed to parse weather data") from e

        snapshot = self.build_snapshot(raw)
        logger.info(
            f"Success: weather for {snapshot.city}, {snapshot.country}: "
            f"temp={snapshot.temp}, condition={snapshot.condition}"
        )
        return snapshot

    @staticmethod
    def build_snapshot(raw: OwmCurrentResponse) -> WeatherSnapshot:
        """Flatten a raw OpenWeather response.

        Raises:
            WeatherDataError: If the response carries no weather entry
        """
        if not raw.weather:
            logger.error("No weather data found")
            raise WeatherDataError("No weather data found")

        current = raw.weather[0]
        return WeatherSnapshot(
            city=raw.name,
            country=raw.sys.country,
            lat=raw.coord.lat,
            lon=raw.coord.lon,
            temp=raw.main.temp,
            feels_like=raw.main.feels_like,
            temp_min=raw.main.temp_min,
            temp_max=raw.main.temp_max,
            condition=current.main,
            humidity=raw.main.humidity,
            pressure=raw.main.pressure,
            wind_speed=raw.wind.speed,
            wind_deg=raw.wind.deg,
            visibility=raw.visibility,
            sunrise=raw.sys.sunrise,
            sunset=raw.sys.sunset,
            clouds=raw.clouds.all,
            icon=icon_url(current.icon),
            timezone=raw.timezone,
        )

    async def aclose(self):
        """Close the OpenWeather client."""
        if self.client:
            try:
                await self.client.aclose()
            except Exception as e:
                logger.error(f"Error closing OpenWeather client: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()


def icon_url(icon: Optional[str]) -> Optional[str]:
    """Expand an OpenWeather icon code to its image URL."""
    if not icon:
        return None
    return ICON_URL_TEMPLATE.format(icon=icon)
