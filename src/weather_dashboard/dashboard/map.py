"""Map view centered on the displayed location."""

import logging
from typing import Awaitable, Callable, Optional, Tuple

from pydantic import BaseModel

from weather_dashboard.config import DEFAULT_MAP_LAT, DEFAULT_MAP_LON, DEFAULT_MAP_ZOOM
from weather_dashboard.dashboard.presentation import as_number, format_temperature
from weather_dashboard.weather.models import WeatherSnapshot

logger = logging.getLogger(__name__)

MapClickHandler = Callable[[float, float], Awaitable[None]]


class MarkerPopup(BaseModel):
    title: str
    subtitle: str


class MapView:
    """Center, marker and popup of the location map."""

    def __init__(self, on_click: Optional[MapClickHandler] = None, zoom: int = DEFAULT_MAP_ZOOM):
        self.on_click = on_click
        self.zoom = zoom
        self.center: Tuple[float, float] = (DEFAULT_MAP_LAT, DEFAULT_MAP_LON)
        self.marker: Tuple[float, float] = self.center
        self.popup: Optional[MarkerPopup] = None

    def show(self, weather: Optional[WeatherSnapshot]) -> None:
        """Recenter on a snapshot, or on the default view without one."""
        if weather is not None and weather.lat is not None and weather.lon is not None:
            self.center = (weather.lat, weather.lon)
        else:
            self.center = (DEFAULT_MAP_LAT, DEFAULT_MAP_LON)
        self.marker = self.center
        self.popup = marker_popup(weather)

    async def click(self, lat: float, lon: float) -> None:
        """Move the marker to a clicked point and report the click."""
        self.marker = (lat, lon)
        logger.info(f"Map clicked at ({lat}, {lon})")
        if self.on_click is not None:
            await self.on_click(lat, lon)


def marker_popup(weather: Optional[WeatherSnapshot]) -> Optional[MarkerPopup]:
    """Popup text for the marker; only shown when a city is known."""
    if weather is None or not weather.city:
        return None
    temperature = format_temperature(weather.temp) if as_number(weather.temp) is not None else ""
    return MarkerPopup(
        title=weather.city,
        subtitle=f"{weather.condition or ''} • {temperature}".strip()
    )
