"""Dashboard controller wiring the search form, display panel and map."""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from weather_dashboard.config import DEBOUNCE_SECONDS, BLUR_GRACE_SECONDS, CLOCK_TICK_SECONDS
from weather_dashboard.dashboard.client import DashboardClient, WeatherFetchError
from weather_dashboard.dashboard.clock import LocalClock
from weather_dashboard.dashboard.map import MapView
from weather_dashboard.dashboard.presentation import (
    PLACEHOLDER, DisplayPanel, background_gradient, display_panel
)
from weather_dashboard.dashboard.search import SearchInput
from weather_dashboard.weather.geocoding import location_label
from weather_dashboard.weather.models import GeocodeSuggestion, WeatherQuery, WeatherSnapshot

logger = logging.getLogger(__name__)


class Dashboard:
    """Holds the current result and reacts to searches and map clicks.

    The snapshot, loading flag and error message are replaced on every
    query; nothing outlives the next one.
    """

    def __init__(
        self,
        client: DashboardClient,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        blur_grace_seconds: float = BLUR_GRACE_SECONDS,
        clock_interval: float = CLOCK_TICK_SECONDS
    ):
        self.client = client
        self.clock_interval = clock_interval

        self.weather: Optional[WeatherSnapshot] = None
        self.loading = False
        self.error = ""

        self.search = SearchInput(
            geocoder=client.suggest,
            on_search=self.fetch_weather,
            debounce_seconds=debounce_seconds,
            blur_grace_seconds=blur_grace_seconds
        )
        self.map = MapView(on_click=self.handle_map_click)
        self.clock: Optional[LocalClock] = None

    @property
    def panel(self) -> Optional[DisplayPanel]:
        clock = self.clock.value if self.clock else PLACEHOLDER
        return display_panel(self.weather, clock=clock, loading=self.loading)

    @property
    def background(self) -> str:
        return background_gradient(self.weather.condition if self.weather else None)

    def _set_loading(self, loading: bool) -> None:
        self.loading = loading
        self.search.disabled = loading

    def _show(self, weather: Optional[WeatherSnapshot]) -> None:
        self.weather = weather
        if self.clock is not None:
            self.clock.stop()
            self.clock = None
        if weather is not None and weather.timezone is not None:
            self.clock = LocalClock(weather.timezone, interval=self.clock_interval)
            self.clock.start()
        self.map.show(weather)

    async def fetch_weather(self, query: WeatherQuery) -> None:
        """Run a search query, replacing the current result."""
        self._set_loading(True)
        self.error = ""
        self._show(None)
        try:
            self._show(await self.client.fetch_weather(query))
        except (WeatherFetchError, ValueError) as e:
            logger.warning(f"Weather search failed: {e}")
            self.error = "City not found or API error"
        finally:
            self._set_loading(False)

    async def handle_map_click(self, lat: float, lon: float) -> None:
        """Query weather at clicked coordinates and label the search box.

        Longitudes from a wrapped world map are brought back into
        [-180, 180). The label comes from reverse geocoding, falling back to
        the coordinates when no place is found or the lookup fails.
        """
        self._set_loading(True)
        self.error = ""
        try:
            lon = wrap_longitude(lon)
            try:
                weather = await self.client.fetch_weather(
                    WeatherQuery(lat=lat, lon=lon),
                    error_message="Location not found or API error"
                )
            except (WeatherFetchError, ValueError) as e:
                logger.warning(f"Weather lookup for map click at ({lat}, {lon}) failed: {e}")
                self.error = "Location not found or API error"
                self._show(None)
                self.search.set_text(location_label(None, lat, lon))
                return

            self._show(weather)
            place = await self._reverse_geocode(lat, lon)
            if place is not None and not place.name:
                place = None
            self.search.set_text(location_label(place, lat, lon), selection=place)
        finally:
            self._set_loading(False)

    async def _reverse_geocode(self, lat: float, lon: float) -> Optional[GeocodeSuggestion]:
        try:
            return await self.client.reverse(lat, lon)
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning(f"Reverse geocoding failed for ({lat}, {lon}): {e}")
            return None

    async def aclose(self) -> None:
        """Stop timers and close the HTTP client."""
        await self.search.aclose()
        if self.clock is not None:
            await self.clock.aclose()
            self.clock = None
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


def wrap_longitude(lon: float) -> float:
    """Map any longitude onto [-180, 180)."""
    return ((lon + 180) % 360) - 180
