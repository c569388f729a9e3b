"""Shared fixtures for the weather dashboard tests."""

import pytest

from weather_dashboard.weather.models import GeocodeSuggestion


@pytest.fixture
def owm_payload() -> dict:
    """Current weather body as returned by OpenWeather for London."""
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "base": "stations",
        "main": {
            "temp": 21.6,
            "feels_like": 21.2,
            "temp_min": 19.8,
            "temp_max": 23.1,
            "pressure": 1012,
            "humidity": 64
        },
        "visibility": 10000,
        "wind": {"speed": 3.6, "deg": 240},
        "clouds": {"all": 75},
        "dt": 1718812800,
        "sys": {"country": "GB", "sunrise": 1718768524, "sunset": 1718828489},
        "timezone": 3600,
        "id": 2643743,
        "name": "London",
        "cod": 200
    }


@pytest.fixture
def snapshot_payload() -> dict:
    """Weather snapshot as served by the weather backend."""
    return {
        "city": "London",
        "country": "GB",
        "lat": 51.5085,
        "lon": -0.1257,
        "temp": 21.6,
        "feels_like": 21.2,
        "temp_min": 19.8,
        "temp_max": 23.1,
        "condition": "Rain",
        "humidity": 64,
        "pressure": 1012,
        "wind_speed": 3.6,
        "wind_deg": 240,
        "visibility": 10000,
        "sunrise": 1718768524,
        "sunset": 1718828489,
        "clouds": 75,
        "icon": "https://openweathermap.org/img/wn/10d@2x.png",
        "timezone": 3600
    }


@pytest.fixture
def geocode_payload() -> list:
    """Direct geocoding body for the text 'London'."""
    return [
        {"name": "London", "lat": 51.5073, "lon": -0.1276, "country": "GB", "state": "England"},
        {"name": "London", "lat": 42.9832, "lon": -81.2433, "country": "CA", "state": "Ontario"},
        {"name": "London", "lat": 37.129, "lon": -84.0833, "country": "US", "state": "Kentucky"},
    ]


@pytest.fixture
def london() -> GeocodeSuggestion:
    return GeocodeSuggestion(name="London", state="England", country="GB", lat=51.5, lon=-0.12)


@pytest.fixture
def suggestions() -> list:
    return [
        GeocodeSuggestion(name="London", state="England", country="GB", lat=51.5, lon=-0.12),
        GeocodeSuggestion(name="London", state="Ontario", country="CA", lat=42.98, lon=-81.24),
        GeocodeSuggestion(name="Londonderry", country="GB", lat=54.99, lon=-7.31),
    ]
