"""Passthrough client forwarding weather queries to the weather backend."""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from weather_dashboard.config import WEATHER_BACKEND_URL, HTTP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    """Raised when the weather backend cannot be reached or parsed."""
    pass


class ProxyResult(BaseModel):
    """Upstream status code and JSON body, relayed unmodified."""
    status_code: int
    body: Any


class WeatherProxy:
    """Forwards exactly one query-parameter pair to the weather backend."""

    def __init__(
        self,
        backend_url: str = WEATHER_BACKEND_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.backend_url = backend_url
        self.client = httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, transport=transport)

    async def forward(self, params: Dict[str, str]) -> ProxyResult:
        """Forward query parameters and relay the backend's response.

        Args:
            params: One parameter pair, as built by passthrough_params

        Returns:
            ProxyResult mirroring the backend status and body

        Raises:
            ProxyError: On network failure or a non-JSON body
        """
        logger.info(f"Forwarding weather request to {self.backend_url} with {params}")

        try:
            response = await self.client.get(self.backend_url, params=params)
            body = response.json()
        except httpx.RequestError as e:
            logger.error(f"Weather backend unreachable: {e}")
            raise ProxyError("Backend error") from e
        except ValueError as e:
            logger.error(f"Weather backend returned a non-JSON body: {e}")
            raise ProxyError("Backend error") from e

        logger.info(f"Weather backend answered with status {response.status_code}")
        return ProxyResult(status_code=response.status_code, body=body)

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


def passthrough_params(
    city: Optional[str],
    lat: Optional[str],
    lon: Optional[str]
) -> Optional[Dict[str, str]]:
    """Pick the single parameter pair to forward, coordinates first.

    Values are passed on as received; the backend decides whether they are
    usable.

    Returns:
        The parameter pair, or None when neither city nor both coordinates
        were given
    """
    if lat and lon:
        return {"lat": lat, "lon": lon}
    if city and city.strip():
        return {"city": city.strip()}
    return None
