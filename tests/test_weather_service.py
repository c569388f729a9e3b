"""Tests for the weather backend: snapshot normalization and its routes."""

import httpx
import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from weather_dashboard.api.backend import get_weather_service
from weather_dashboard.main import create_backend_app
from weather_dashboard.weather.client import MissingApiKeyError, OpenWeatherClient
from weather_dashboard.weather.models import OwmCurrentResponse, WeatherQuery
from weather_dashboard.weather.service import (
    WeatherDataError, WeatherNotFoundError, WeatherService, icon_url
)

OWM_URL = "https://owm.test"


class Upstream:
    """Records OpenWeather requests and answers from a canned handler."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def params(self):
        return dict(self.requests[-1].url.params)


def _service(upstream, api_key="test-key"):
    client = OpenWeatherClient(api_key=api_key, base_url=OWM_URL, transport=httpx.MockTransport(upstream))
    return WeatherService(client)


@pytest.mark.asyncio
async def test_snapshot_by_city(owm_payload):
    upstream = Upstream(lambda request: httpx.Response(200, json=owm_payload))

    async with _service(upstream) as service:
        snapshot = await service.get_snapshot(WeatherQuery(city="  London "))

    assert upstream.requests[0].url.path == "/data/2.5/weather"
    assert upstream.params == {"q": "London", "units": "metric", "appid": "test-key"}
    assert snapshot.city == "London"
    assert snapshot.country == "GB"
    assert snapshot.lat == 51.5085
    assert snapshot.temp == 21.6
    assert snapshot.condition == "Rain"
    assert snapshot.wind_speed == 3.6
    assert snapshot.clouds == 75
    assert snapshot.timezone == 3600
    assert snapshot.icon == "https://openweathermap.org/img/wn/10d@2x.png"


@pytest.mark.asyncio
async def test_coordinates_take_precedence_over_city(owm_payload):
    upstream = Upstream(lambda request: httpx.Response(200, json=owm_payload))

    async with _service(upstream) as service:
        await service.get_snapshot(WeatherQuery(city="Paris", lat=51.5, lon=-0.12))

    params = upstream.params
    assert params["lat"] == "51.5"
    assert params["lon"] == "-0.12"
    assert "q" not in params


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_any_request():
    upstream = Upstream(lambda request: httpx.Response(200, json={}))

    async with _service(upstream, api_key=None) as service:
        with pytest.raises(MissingApiKeyError, match="API key not set"):
            await service.get_snapshot(WeatherQuery(city="London"))

    assert upstream.requests == []


@pytest.mark.asyncio
async def test_empty_query_is_rejected():
    upstream = Upstream(lambda request: httpx.Response(200, json={}))

    async with _service(upstream) as service:
        with pytest.raises(ValueError, match="City or coordinates required"):
            await service.get_snapshot(WeatherQuery(city="   ", lat=10.0))

    assert upstream.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [401, 404, 500])
async def test_upstream_error_status_is_not_found(status):
    upstream = Upstream(lambda request: httpx.Response(status, json={"cod": str(status), "message": "nope"}))

    async with _service(upstream) as service:
        with pytest.raises(WeatherNotFoundError, match="City not found or API error"):
            await service.get_snapshot(WeatherQuery(city="Atlantis"))


@pytest.mark.asyncio
async def test_unreachable_upstream_is_not_found():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _service(Upstream(handler)) as service:
        with pytest.raises(WeatherNotFoundError):
            await service.get_snapshot(WeatherQuery(city="London"))


@pytest.mark.asyncio
async def test_malformed_body_fails_to_parse():
    upstream = Upstream(lambda request: httpx.Response(200, text="<html>oops</html>"))

    async with _service(upstream) as service:
        with pytest.raises(WeatherDataError, match="Failed to parse weather data"):
            await service.get_snapshot(WeatherQuery(city="London"))


@pytest.mark.asyncio
async def test_body_without_weather_entry_is_rejected(owm_payload):
    owm_payload["weather"] = []
    upstream = Upstream(lambda request: httpx.Response(200, json=owm_payload))

    async with _service(upstream) as service:
        with pytest.raises(WeatherDataError, match="No weather data found"):
            await service.get_snapshot(WeatherQuery(city="London"))


def test_sparse_body_leaves_fields_unset():
    raw = OwmCurrentResponse.model_validate({"name": "Nowhere", "weather": [{"main": "Clear", "icon": ""}]})
    snapshot = WeatherService.build_snapshot(raw)

    assert snapshot.city == "Nowhere"
    assert snapshot.condition == "Clear"
    assert snapshot.temp is None
    assert snapshot.icon is None


def test_icon_url():
    assert icon_url("01n") == "https://openweathermap.org/img/wn/01n@2x.png"
    assert icon_url("") is None


@pytest.fixture
def backend(owm_payload):
    """Backend app wired to a stubbed OpenWeather upstream."""
    state = {"status": 200, "body": owm_payload}
    upstream = Upstream(lambda request: httpx.Response(state["status"], json=state["body"]))
    app = create_backend_app(api_key="test-key")

    async def override(request: Request):
        client = OpenWeatherClient(
            api_key=request.app.state.api_key,
            base_url=OWM_URL,
            transport=httpx.MockTransport(upstream)
        )
        async with WeatherService(client) as service:
            yield service

    app.dependency_overrides[get_weather_service] = override
    with TestClient(app) as client:
        yield client, upstream, state


def test_backend_returns_snapshot(backend):
    client, upstream, _ = backend

    response = client.get("/weather", params={"city": "London"})

    assert response.status_code == 200
    body = response.json()
    assert body["city"] == "London"
    assert body["condition"] == "Rain"
    assert body["icon"].endswith("10d@2x.png")
    assert upstream.params["q"] == "London"


def test_backend_requires_city_or_coordinates(backend):
    client, upstream, _ = backend

    response = client.get("/weather", params={"lat": "51.5"})

    assert response.status_code == 400
    assert response.json() == {"error": "City or coordinates required"}
    assert upstream.requests == []


def test_backend_maps_upstream_failure_to_404(backend):
    client, _, state = backend
    state["status"] = 404
    state["body"] = {"cod": "404", "message": "city not found"}

    response = client.get("/weather", params={"city": "Atlantis"})

    assert response.status_code == 404
    assert response.json() == {"error": "City not found or API error"}


def test_backend_reports_missing_weather_entry(backend):
    client, _, state = backend
    state["body"] = {**state["body"], "weather": []}

    response = client.get("/weather", params={"city": "London"})

    assert response.status_code == 500
    assert response.json() == {"error": "No weather data found"}


def test_backend_without_api_key():
    app = create_backend_app(api_key=None)
    with TestClient(app) as client:
        response = client.get("/weather", params={"city": "London"})

    assert response.status_code == 500
    assert response.json() == {"error": "API key not set"}


def test_backend_rejects_out_of_range_coordinates(backend):
    client, upstream, _ = backend

    response = client.get("/weather", params={"lat": "120", "lon": "0"})

    assert response.status_code == 422
    assert upstream.requests == []


def test_backend_health(backend):
    client, _, _ = backend
    assert client.get("/health").json() == {"status": "healthy", "service": "weather-backend"}
