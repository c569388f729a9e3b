"""API endpoints of the dashboard service: weather proxy and geocoding."""

import logging
from typing import AsyncGenerator, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from weather_dashboard.weather.client import MissingApiKeyError, OpenWeatherClient
from weather_dashboard.weather.geocoding import GeocodingError, GeocodingService
from weather_dashboard.weather.models import ErrorResponse, GeocodeSuggestion
from weather_dashboard.weather.proxy import ProxyError, WeatherProxy, passthrough_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build a JSON error body in the shape every route uses."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(exclude_none=True)
    )


async def get_weather_proxy(request: Request) -> AsyncGenerator[WeatherProxy, None]:
    """Dependency yielding a proxy bound to the configured weather backend."""
    async with WeatherProxy(backend_url=request.app.state.backend_url) as proxy:
        yield proxy


async def get_geocoding_service(request: Request) -> AsyncGenerator[GeocodingService, None]:
    """Dependency yielding a geocoding service using the injected API key."""
    async with OpenWeatherClient(api_key=request.app.state.api_key) as client:
        yield GeocodingService(client)


@router.get("/weather")
async def proxy_weather(
    city: Optional[str] = Query(
        None,
        description="City name (alternative to lat/lon)"
    ),
    lat: Optional[str] = Query(
        None,
        description="Latitude in decimal degrees (use with lon)"
    ),
    lon: Optional[str] = Query(
        None,
        description="Longitude in decimal degrees (use with lat)"
    ),
    proxy: WeatherProxy = Depends(get_weather_proxy)
) -> JSONResponse:
    """Relay a weather query to the weather backend.

    Parameters are forwarded as received and the backend's JSON body and
    status code are returned unmodified.

    Args:
        city: City name
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees

    Returns:
        Backend response, 400 without a usable query, 500 if the backend
        cannot be reached or answers with something other than JSON
    """
    params = passthrough_params(city, lat, lon)
    if params is None:
        logger.error("Error: City or coordinates required")
        return error_response(400, "City or coordinates required")

    try:
        result = await proxy.forward(params)
    except ProxyError as e:
        return error_response(500, str(e))

    return JSONResponse(status_code=result.status_code, content=result.body)


@router.get("/geocode", response_model=List[GeocodeSuggestion])
async def geocode(
    q: str = Query("", description="Free text typed into the search box"),
    service: GeocodingService = Depends(get_geocoding_service)
):
    """Suggest places matching free text.

    Returns:
        Up to five suggestions, empty for blank text
    """
    try:
        return await service.suggest(q)
    except MissingApiKeyError as e:
        logger.error(f"Geocoding unavailable: {e}")
        return error_response(500, str(e))
    except GeocodingError as e:
        logger.error(f"Error geocoding '{q}': {e}")
        return error_response(502, str(e))


@router.get("/geocode/reverse", response_model=List[GeocodeSuggestion])
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90, description="Latitude in decimal degrees"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude in decimal degrees"),
    service: GeocodingService = Depends(get_geocoding_service)
):
    """Name the place at a pair of coordinates.

    Returns:
        At most one place
    """
    try:
        return await service.reverse(lat, lon)
    except MissingApiKeyError as e:
        logger.error(f"Reverse geocoding unavailable: {e}")
        return error_response(500, str(e))
    except GeocodingError as e:
        logger.error(f"Error reverse geocoding ({lat}, {lon}): {e}")
        return error_response(502, str(e))


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "service": "weather-dashboard"}


@router.get("/info")
async def get_service_info(request: Request) -> dict:
    """Get service information.

    Returns:
        Service information including the configured weather backend
    """
    return {
        "service": "Weather Dashboard",
        "version": "0.1.0",
        "weather_backend": request.app.state.backend_url,
        "features": [
            "Weather passthrough by city or coordinates",
            "Place suggestions and reverse geocoding"
        ],
        "data_source": "OpenWeather API"
    }
