"""Data models for the weather dashboard services."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class WeatherQuery(BaseModel):
    """Weather lookup by city name or by coordinates."""
    city: Optional[str] = Field(None, description="Free-text city name")
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Latitude in decimal degrees")
    lon: Optional[float] = Field(None, ge=-180, le=180, description="Longitude in decimal degrees")

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None

    @property
    def has_city(self) -> bool:
        return bool(self.city and self.city.strip())

    @property
    def is_empty(self) -> bool:
        return not self.has_coordinates and not self.has_city

    def to_params(self) -> Dict[str, str]:
        """Return exactly one query-parameter pair, coordinates first.

        Raises:
            ValueError: If neither a city nor both coordinates are set
        """
        if self.has_coordinates:
            return {"lat": str(self.lat), "lon": str(self.lon)}
        if self.has_city:
            return {"city": self.city.strip()}
        raise ValueError("City or coordinates required")


class GeocodeSuggestion(BaseModel):
    """Place returned by forward or reverse geocoding."""
    name: str = Field(..., description="Place name")
    state: Optional[str] = Field(None, description="State or region, if any")
    country: Optional[str] = Field(None, description="ISO country code")
    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")

    @property
    def label(self) -> str:
        """Human-readable 'name[, state][, country]' label."""
        parts = [self.name]
        if self.state:
            parts.append(self.state)
        if self.country:
            parts.append(self.country)
        return ", ".join(parts)


class WeatherSnapshot(BaseModel):
    """Current conditions for one location."""
    city: Optional[str] = Field(None, description="City name")
    country: Optional[str] = Field(None, description="ISO country code")
    lat: Optional[float] = Field(None, description="Latitude in decimal degrees")
    lon: Optional[float] = Field(None, description="Longitude in decimal degrees")
    temp: Optional[float] = Field(None, description="Temperature in Celsius")
    feels_like: Optional[float] = Field(None, description="Feels-like temperature in Celsius")
    temp_min: Optional[float] = Field(None, description="Minimum temperature in Celsius")
    temp_max: Optional[float] = Field(None, description="Maximum temperature in Celsius")
    condition: Optional[str] = Field(None, description="Weather group, e.g. 'Rain'")
    humidity: Optional[float] = Field(None, description="Relative humidity in percent")
    pressure: Optional[float] = Field(None, description="Pressure in hPa")
    wind_speed: Optional[float] = Field(None, description="Wind speed in m/s")
    wind_deg: Optional[float] = Field(None, description="Wind direction in degrees")
    visibility: Optional[float] = Field(None, description="Visibility in meters")
    sunrise: Optional[int] = Field(None, description="Sunrise as unix seconds")
    sunset: Optional[int] = Field(None, description="Sunset as unix seconds")
    clouds: Optional[float] = Field(None, description="Cloudiness in percent")
    icon: Optional[str] = Field(None, description="Condition icon URL")
    timezone: Optional[int] = Field(None, description="Offset from UTC in seconds")


class OwmCoord(BaseModel):
    lat: Optional[float] = None
    lon: Optional[float] = None


class OwmMain(BaseModel):
    temp: Optional[float] = None
    feels_like: Optional[float] = None
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    pressure: Optional[float] = None
    humidity: Optional[float] = None


class OwmWeatherEntry(BaseModel):
    main: str = ""
    description: Optional[str] = None
    icon: str = ""


class OwmWind(BaseModel):
    speed: Optional[float] = None
    deg: Optional[float] = None


class OwmClouds(BaseModel):
    all: Optional[float] = None


class OwmSys(BaseModel):
    country: Optional[str] = None
    sunrise: Optional[int] = None
    sunset: Optional[int] = None


class OwmCurrentResponse(BaseModel):
    """Raw response from the OpenWeather current weather API."""
    name: Optional[str] = Field(None, description="Resolved city name")
    coord: OwmCoord = Field(default_factory=OwmCoord)
    main: OwmMain = Field(default_factory=OwmMain)
    weather: List[OwmWeatherEntry] = Field(default_factory=list)
    wind: OwmWind = Field(default_factory=OwmWind)
    clouds: OwmClouds = Field(default_factory=OwmClouds)
    sys: OwmSys = Field(default_factory=OwmSys)
    visibility: Optional[float] = None
    timezone: Optional[int] = None


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
