"""Configuration settings for the weather dashboard services."""

import os
from typing import Final, Optional
from dotenv import load_dotenv

load_dotenv()

# OpenWeather API configuration
OPENWEATHER_API_KEY: Optional[str] = os.getenv("OPENWEATHER_API_KEY") or None
OPENWEATHER_BASE_URL: str = os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org")
OPENWEATHER_WEATHER_PATH: Final[str] = "/data/2.5/weather"
OPENWEATHER_DIRECT_GEOCODE_PATH: Final[str] = "/geo/1.0/direct"
OPENWEATHER_REVERSE_GEOCODE_PATH: Final[str] = "/geo/1.0/reverse"
OPENWEATHER_UNITS: Final[str] = "metric"
ICON_URL_TEMPLATE: Final[str] = "https://openweathermap.org/img/wn/{icon}@2x.png"
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

# Geocoding limits
SUGGESTION_LIMIT: Final[int] = 5
REVERSE_GEOCODE_LIMIT: Final[int] = 1

# Dashboard server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Weather backend server configuration
BACKEND_HOST: str = os.getenv("BACKEND_HOST", "0.0.0.0")
BACKEND_PORT: int = int(os.getenv("BACKEND_PORT", "8001"))

# Upstream the /weather proxy forwards to
WEATHER_BACKEND_URL: str = os.getenv("WEATHER_BACKEND_URL", f"http://localhost:{BACKEND_PORT}/weather")

# Dashboard client settings
DASHBOARD_URL: str = os.getenv("DASHBOARD_URL", f"http://localhost:{PORT}")
DEBOUNCE_SECONDS: float = float(os.getenv("DEBOUNCE_SECONDS", "0.3"))
BLUR_GRACE_SECONDS: float = float(os.getenv("BLUR_GRACE_SECONDS", "0.15"))
CLOCK_TICK_SECONDS: float = float(os.getenv("CLOCK_TICK_SECONDS", "1"))

# Default map view when no weather is loaded
DEFAULT_MAP_LAT: Final[float] = 20.0
DEFAULT_MAP_LON: Final[float] = 0.0
DEFAULT_MAP_ZOOM: Final[int] = 10
