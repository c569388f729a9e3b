"""Geocoding service backed by the OpenWeather geocoding API."""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from weather_dashboard.config import SUGGESTION_LIMIT, REVERSE_GEOCODE_LIMIT
from weather_dashboard.weather.client import OpenWeatherClient
from weather_dashboard.weather.models import GeocodeSuggestion

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised when geocoding fails."""
    pass


class GeocodingService:
    """Service for forward and reverse geocoding operations."""

    def __init__(self, client: OpenWeatherClient):
        self.client = client

    async def suggest(self, query: str, limit: int = SUGGESTION_LIMIT) -> List[GeocodeSuggestion]:
        """Convert free text to an ordered list of candidate places.

        Args:
            query: Text typed so far
            limit: Maximum number of suggestions

        Returns:
            Suggestions in upstream order, empty for blank text

        Raises:
            GeocodingError: If the upstream request fails
        """
        query = query.strip()
        if not query:
            return []

        try:
            raw = await self.client.direct_geocode(query, limit=limit)
            suggestions = [GeocodeSuggestion.model_validate(item) for item in raw]
        except httpx.HTTPError as e:
            logger.error(f"Geocoding service unavailable for '{query}': {e}")
            raise GeocodingError("Geocoding service temporarily unavailable") from e
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Invalid geocoding response for '{query}': {e}")
            raise GeocodingError(f"Failed to geocode '{query}'") from e

        logger.info(f"Found {len(suggestions)} suggestions for '{query}'")
        return suggestions

    async def reverse(
        self,
        lat: float,
        lon: float,
        limit: int = REVERSE_GEOCODE_LIMIT
    ) -> List[GeocodeSuggestion]:
        """Convert coordinates to nearby place names.

        Raises:
            GeocodingError: If the upstream request fails
        """
        try:
            raw = await self.client.reverse_geocode(lat, lon, limit=limit)
            places = [GeocodeSuggestion.model_validate(item) for item in raw]
        except httpx.HTTPError as e:
            logger.warning(f"Reverse geocoding service unavailable for ({lat}, {lon}): {e}")
            raise GeocodingError("Geocoding service temporarily unavailable") from e
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Invalid reverse geocoding response for ({lat}, {lon}): {e}")
            raise GeocodingError("Failed to reverse geocode coordinates") from e

        if places:
            logger.info(f"Reverse geocoded ({lat}, {lon}) to '{places[0].label}'")
        else:
            logger.info(f"No place found for coordinates ({lat}, {lon})")
        return places


def coordinate_label(lat: float, lon: float) -> str:
    """Fallback label for a location without a known place name."""
    return f"{lat:.4f},{lon:.4f}"


def location_label(place: Optional[GeocodeSuggestion], lat: float, lon: float) -> str:
    """Label a clicked location by place name, or by its coordinates."""
    if place is not None and place.name:
        return place.label
    return coordinate_label(lat, lon)
