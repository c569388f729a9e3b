"""HTTP client for the OpenWeather weather and geocoding APIs."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from weather_dashboard.config import (
    OPENWEATHER_BASE_URL, OPENWEATHER_WEATHER_PATH,
    OPENWEATHER_DIRECT_GEOCODE_PATH, OPENWEATHER_REVERSE_GEOCODE_PATH,
    OPENWEATHER_UNITS, HTTP_TIMEOUT_SECONDS,
    SUGGESTION_LIMIT, REVERSE_GEOCODE_LIMIT
)

logger = logging.getLogger(__name__)


class MissingApiKeyError(RuntimeError):
    """Raised when no OpenWeather API key was configured."""
    pass


class OpenWeatherClient:
    """Async client for fetching data from the OpenWeather API."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = OPENWEATHER_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the OpenWeather client.

        Args:
            api_key: OpenWeather API key sent as the ``appid`` parameter
            base_url: Base URL for the OpenWeather API
            transport: Optional httpx transport, used to stub the upstream
        """
        self.api_key = api_key
        self.base_url = base_url
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=HTTP_TIMEOUT_SECONDS,
            transport=transport
        )

    def _params(self, **params: Any) -> Dict[str, Any]:
        if not self.api_key:
            raise MissingApiKeyError("API key not set")
        return {**params, "appid": self.api_key}

    async def get_current_weather(
        self,
        *,
        city: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None
    ) -> httpx.Response:
        """Fetch current conditions by coordinates or by city name.

        Coordinates take precedence when both are given. The raw response is
        returned so that callers decide how to treat the upstream status.

        Raises:
            MissingApiKeyError: If no API key is configured
            ValueError: If neither a city nor both coordinates are given
            httpx.RequestError: If the upstream cannot be reached
        """
        if lat is not None and lon is not None:
            logger.info(f"Fetching current weather for coordinates: lat={lat}, lon={lon}")
            params = self._params(lat=lat, lon=lon, units=OPENWEATHER_UNITS)
        elif city:
            logger.info(f"Fetching current weather for city: {city}")
            params = self._params(q=city, units=OPENWEATHER_UNITS)
        else:
            raise ValueError("City or coordinates required")

        return await self.client.get(OPENWEATHER_WEATHER_PATH, params=params)

    async def direct_geocode(self, query: str, limit: int = SUGGESTION_LIMIT) -> List[Dict[str, Any]]:
        """Resolve free text to a list of candidate places.

        Raises:
            MissingApiKeyError: If no API key is configured
            httpx.HTTPError: If the request fails or returns an error status
        """
        params = self._params(q=query, limit=limit)
        logger.debug(f"Forward geocoding '{query}' (limit={limit})")

        response = await self.client.get(OPENWEATHER_DIRECT_GEOCODE_PATH, params=params)
        response.raise_for_status()
        return response.json()

    async def reverse_geocode(
        self,
        lat: float,
        lon: float,
        limit: int = REVERSE_GEOCODE_LIMIT
    ) -> List[Dict[str, Any]]:
        """Resolve coordinates to a list of nearby places.

        Raises:
            MissingApiKeyError: If no API key is configured
            httpx.HTTPError: If the request fails or returns an error status
        """
        params = self._params(lat=lat, lon=lon, limit=limit)
        logger.debug(f"Reverse geocoding ({lat}, {lon}) (limit={limit})")

        response = await self.client.get(OPENWEATHER_REVERSE_GEOCODE_PATH, params=params)
        response.raise_for_status()
        return response.json()

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
