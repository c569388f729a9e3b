"""API endpoints of the weather backend service."""

import logging
from typing import AsyncGenerator, Optional

from fastapi import APIRouter, Depends, Query, Request

from weather_dashboard.api.endpoints import error_response
from weather_dashboard.weather.client import MissingApiKeyError, OpenWeatherClient
from weather_dashboard.weather.models import ErrorResponse, WeatherQuery, WeatherSnapshot
from weather_dashboard.weather.service import (
    WeatherDataError, WeatherNotFoundError, WeatherService
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["weather"])


async def get_weather_service(request: Request) -> AsyncGenerator[WeatherService, None]:
    """Dependency yielding a weather service using the injected API key."""
    async with WeatherService(OpenWeatherClient(api_key=request.app.state.api_key)) as service:
        yield service


@router.get(
    "/weather",
    response_model=WeatherSnapshot,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def get_current_weather(
    city: Optional[str] = Query(
        None,
        description="City name (alternative to lat/lon)"
    ),
    lat: Optional[float] = Query(
        None,
        ge=-90,
        le=90,
        description="Latitude in decimal degrees (use with lon)"
    ),
    lon: Optional[float] = Query(
        None,
        ge=-180,
        le=180,
        description="Longitude in decimal degrees (use with lat)"
    ),
    service: WeatherService = Depends(get_weather_service)
):
    """Get current conditions by city name or coordinates.

    Coordinates take precedence when both are supplied.

    Returns:
        WeatherSnapshot, or an error body with status 400, 404 or 500
    """
    query = WeatherQuery(city=city, lat=lat, lon=lon)

    try:
        snapshot = await service.get_snapshot(query)
    except MissingApiKeyError as e:
        return error_response(500, str(e))
    except ValueError as e:
        logger.error(f"Error: {e}")
        return error_response(400, str(e))
    except WeatherNotFoundError as e:
        return error_response(404, str(e))
    except WeatherDataError as e:
        return error_response(500, str(e))

    return snapshot


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "service": "weather-backend"}
