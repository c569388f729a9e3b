"""Derived display values for the weather dashboard."""

import math
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from weather_dashboard.weather.models import WeatherSnapshot

PLACEHOLDER = "--"

# Ordered keyword groups; the first group found in the condition wins
THEME_RULES: Sequence[Tuple[Tuple[str, ...], str]] = (
    (("clear", "sun"), "clear"),
    (("cloud",), "clouds"),
    (("rain", "drizzle"), "rain"),
    (("snow",), "snow"),
    (("thunder",), "thunderstorm"),
    (("mist", "fog", "haze"), "mist"),
)

# Page background distinguishes drizzle from rain
GRADIENT_RULES: Sequence[Tuple[Tuple[str, ...], str]] = (
    (("clear", "sun"), "clear"),
    (("cloud",), "clouds"),
    (("rain",), "rain"),
    (("drizzle",), "drizzle"),
    (("snow",), "snow"),
    (("thunder",), "thunderstorm"),
    (("mist", "fog", "haze"), "mist"),
)


class DetailRow(BaseModel):
    """One labelled value in the display panel grid."""
    icon: str = Field(..., description="Icon name")
    label: str
    value: str


class DisplayPanel(BaseModel):
    """Everything the display panel renders for one snapshot."""
    temperature: str
    icon: Optional[str] = None
    condition: str
    location: str
    local_time: str
    theme_class: str
    details: List[DetailRow]


def match_condition(condition: Optional[str], rules: Sequence[Tuple[Tuple[str, ...], str]]) -> Optional[str]:
    """Return the name of the first rule whose keyword occurs in the condition."""
    if not condition:
        return None
    lowered = condition.lower()
    for keywords, name in rules:
        if any(keyword in lowered for keyword in keywords):
            return name
    return None


def theme_class(condition: Optional[str]) -> str:
    """Display panel theme class for a condition string."""
    name = match_condition(condition, THEME_RULES)
    return f"weather-bg-{name or 'default'}"


def background_gradient(condition: Optional[str]) -> str:
    """Page background gradient class for a condition string."""
    name = match_condition(condition, GRADIENT_RULES)
    return f"bg-gradient-{name or 'clouds'}"


def as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_half_up(value: float) -> int:
    """Round halves towards positive infinity, like a browser's Math.round."""
    return math.floor(value + 0.5)


def safe_value(value: Any, unit: str = "", digits: int = 0) -> str:
    """Render a number with its unit, or the placeholder when missing/NaN."""
    number = as_number(value)
    if number is None:
        return PLACEHOLDER
    if digits == 0:
        return f"{round_half_up(number)}{unit}"
    return f"{number:.{digits}f}{unit}"


def format_temperature(value: Any) -> str:
    return safe_value(value, "°C")


def format_percent(value: Any) -> str:
    return safe_value(value, "%")


def format_pressure(value: Any) -> str:
    return safe_value(value, " hPa")


def format_wind(speed: Any, degrees: Any = None) -> str:
    """Wind speed in m/s, followed by its direction when known."""
    if as_number(speed) is None:
        return PLACEHOLDER
    text = safe_value(speed, " m/s", digits=1)
    if as_number(degrees) is not None:
        text += f" ({safe_value(degrees, '°')})"
    return text


def format_visibility(meters: Any) -> str:
    number = as_number(meters)
    if number is None:
        return PLACEHOLDER
    return safe_value(number / 1000, " km", digits=1)


def format_clock(unix: Any, tz_offset: Any = 0) -> str:
    """Render a unix timestamp as HH:MM at the location's UTC offset."""
    seconds = as_number(unix)
    if not seconds:
        return PLACEHOLDER
    offset = as_number(tz_offset) or 0
    moment = datetime.fromtimestamp(seconds + offset, tz=timezone.utc)
    return moment.strftime("%H:%M")


def local_time(tz_offset: Any, now: Optional[datetime] = None) -> str:
    """Current time of day at a location, from its UTC offset in seconds."""
    offset = as_number(tz_offset)
    if offset is None:
        return PLACEHOLDER
    now = now or datetime.now(timezone.utc)
    return (now.astimezone(timezone.utc) + timedelta(seconds=offset)).strftime("%H:%M")


def location_line(weather: WeatherSnapshot) -> str:
    return f"{weather.city or PLACEHOLDER}, {weather.country or PLACEHOLDER}"


def detail_rows(weather: WeatherSnapshot) -> List[DetailRow]:
    """Grid of secondary values shown under the headline temperature."""
    return [
        DetailRow(icon="thermometer-half", label="Feels Like", value=format_temperature(weather.feels_like)),
        DetailRow(icon="arrow-down", label="Min", value=format_temperature(weather.temp_min)),
        DetailRow(icon="arrow-up", label="Max", value=format_temperature(weather.temp_max)),
        DetailRow(icon="tint", label="Humidity", value=format_percent(weather.humidity)),
        DetailRow(icon="tachometer-alt", label="Pressure", value=format_pressure(weather.pressure)),
        DetailRow(icon="wind", label="Wind", value=format_wind(weather.wind_speed, weather.wind_deg)),
        DetailRow(icon="cloud", label="Clouds", value=format_percent(weather.clouds)),
        DetailRow(icon="eye", label="Visibility", value=format_visibility(weather.visibility)),
        DetailRow(icon="sun", label="Sunrise", value=format_clock(weather.sunrise, weather.timezone)),
        DetailRow(icon="moon", label="Sunset", value=format_clock(weather.sunset, weather.timezone)),
    ]


def display_panel(
    weather: Optional[WeatherSnapshot],
    clock: str = PLACEHOLDER,
    loading: bool = False
) -> Optional[DisplayPanel]:
    """Build the display panel, or None while loading or without a result.

    Args:
        weather: Snapshot to render
        clock: Already formatted local time of day
        loading: Whether a query is in flight

    Returns:
        DisplayPanel view model, or None when nothing should be shown
    """
    if loading or weather is None:
        return None

    return DisplayPanel(
        temperature=format_temperature(weather.temp),
        icon=weather.icon,
        condition=weather.condition or PLACEHOLDER,
        location=location_line(weather),
        local_time=clock,
        theme_class=theme_class(weather.condition),
        details=detail_rows(weather),
    )
