"""HTTP client the dashboard uses to talk to the dashboard service."""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from weather_dashboard.config import DASHBOARD_URL, HTTP_TIMEOUT_SECONDS
from weather_dashboard.weather.models import GeocodeSuggestion, WeatherQuery, WeatherSnapshot

logger = logging.getLogger(__name__)


class WeatherFetchError(Exception):
    """Raised when a weather query does not produce a snapshot."""
    pass


class DashboardClient:
    """Async client for the /weather and /geocode routes."""

    def __init__(
        self,
        base_url: str = DASHBOARD_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=HTTP_TIMEOUT_SECONDS,
            transport=transport
        )

    async def fetch_weather(
        self,
        query: WeatherQuery,
        error_message: str = "City not found or API error"
    ) -> WeatherSnapshot:
        """Fetch current conditions through the weather proxy.

        Args:
            query: City name or coordinates
            error_message: Message carried by the raised error on failure

        Raises:
            ValueError: If the query has neither city nor coordinates
            WeatherFetchError: On any network, status or decoding failure
        """
        params = query.to_params()
        try:
            response = await self.client.get("/weather", params=params)
        except httpx.RequestError as e:
            logger.error(f"Weather request failed for {params}: {e}")
            raise WeatherFetchError(error_message) from e

        if not response.is_success:
            logger.warning(f"Weather request for {params} returned {response.status_code}")
            raise WeatherFetchError(error_message)

        try:
            return WeatherSnapshot.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Unusable weather body for {params}: {e}")
            raise WeatherFetchError(error_message) from e

    async def suggest(self, text: str) -> List[GeocodeSuggestion]:
        """Place suggestions for free text.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status
        """
        response = await self.client.get("/geocode", params={"q": text})
        response.raise_for_status()
        return [GeocodeSuggestion.model_validate(item) for item in response.json()]

    async def reverse(self, lat: float, lon: float) -> Optional[GeocodeSuggestion]:
        """Closest named place for a pair of coordinates, if any.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status
        """
        response = await self.client.get("/geocode/reverse", params={"lat": lat, "lon": lon})
        response.raise_for_status()
        places = response.json()
        if not places:
            return None
        return GeocodeSuggestion.model_validate(places[0])

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
