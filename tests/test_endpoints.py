"""Tests for the dashboard service routes: weather passthrough and geocoding."""

import httpx
import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from weather_dashboard.api.endpoints import get_geocoding_service, get_weather_proxy
from weather_dashboard.main import create_app
from weather_dashboard.weather.client import OpenWeatherClient
from weather_dashboard.weather.geocoding import GeocodingService
from weather_dashboard.weather.proxy import WeatherProxy

BACKEND_URL = "http://backend.test/weather"


class Recorder:
    """Mock transport handler that records requests and replies via a callable."""

    def __init__(self, reply):
        self.reply = reply
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.reply(request)

    @property
    def params(self):
        return dict(self.requests[-1].url.params)


@pytest.fixture
def backend():
    return Recorder(lambda request: httpx.Response(200, json={"city": "London", "temp": 21.6}))


@pytest.fixture
def owm(geocode_payload):
    return Recorder(lambda request: httpx.Response(200, json=geocode_payload))


def _client(backend, owm, api_key="test-key"):
    app = create_app(api_key=api_key, backend_url=BACKEND_URL)

    async def proxy_override(request: Request):
        async with WeatherProxy(
            backend_url=request.app.state.backend_url,
            transport=httpx.MockTransport(backend)
        ) as proxy:
            yield proxy

    async def geocoding_override(request: Request):
        async with OpenWeatherClient(
            api_key=request.app.state.api_key,
            base_url="https://owm.test",
            transport=httpx.MockTransport(owm)
        ) as client:
            yield GeocodingService(client)

    app.dependency_overrides[get_weather_proxy] = proxy_override
    app.dependency_overrides[get_geocoding_service] = geocoding_override
    return TestClient(app)


@pytest.fixture
def client(backend, owm):
    with _client(backend, owm) as test_client:
        yield test_client


def test_weather_without_query_is_rejected_locally(client, backend):
    response = client.get("/weather")

    assert response.status_code == 400
    assert response.json() == {"error": "City or coordinates required"}
    assert backend.requests == []


def test_weather_with_only_one_coordinate_is_rejected(client, backend):
    response = client.get("/weather", params={"lon": "10"})

    assert response.status_code == 400
    assert backend.requests == []


def test_weather_forwards_city_only(client, backend):
    response = client.get("/weather", params={"city": " London "})

    assert response.status_code == 200
    assert response.json() == {"city": "London", "temp": 21.6}
    assert str(backend.requests[0].url).startswith(BACKEND_URL)
    assert backend.params == {"city": "London"}


def test_weather_forwards_coordinates_in_preference_to_city(client, backend):
    client.get("/weather", params={"city": "Paris", "lat": "51.5", "lon": "-0.12"})

    assert backend.params == {"lat": "51.5", "lon": "-0.12"}


def test_weather_mirrors_backend_errors_verbatim(client, backend):
    backend.reply = lambda request: httpx.Response(404, json={"error": "City not found or API error"})

    response = client.get("/weather", params={"city": "Atlantis"})

    assert response.status_code == 404
    assert response.json() == {"error": "City not found or API error"}


def test_weather_forwards_out_of_range_coordinates_and_mirrors_rejection(client, backend):
    backend.reply = lambda request: httpx.Response(400, json={"error": "wrong longitude"})

    response = client.get("/weather", params={"lat": "51.5", "lon": "200"})

    assert backend.params == {"lat": "51.5", "lon": "200"}
    assert response.status_code == 400
    assert response.json() == {"error": "wrong longitude"}


def test_weather_forwards_non_numeric_coordinates_verbatim(client, backend):
    client.get("/weather", params={"lat": "north", "lon": "west"})

    assert backend.params == {"lat": "north", "lon": "west"}


def test_weather_unreachable_backend(client, backend):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    backend.reply = refuse

    response = client.get("/weather", params={"city": "London"})

    assert response.status_code == 500
    assert response.json() == {"error": "Backend error"}


def test_weather_non_json_backend_body(client, backend):
    backend.reply = lambda request: httpx.Response(502, text="Bad Gateway")

    response = client.get("/weather", params={"city": "London"})

    assert response.status_code == 500
    assert response.json() == {"error": "Backend error"}


def test_geocode_suggestions(client, owm):
    response = client.get("/geocode", params={"q": "London"})

    assert response.status_code == 200
    body = response.json()
    assert [place["state"] for place in body] == ["England", "Ontario", "Kentucky"]
    assert owm.requests[0].url.path == "/geo/1.0/direct"
    assert owm.params == {"q": "London", "limit": "5", "appid": "test-key"}


def test_geocode_blank_text_skips_upstream(client, owm):
    response = client.get("/geocode", params={"q": "   "})

    assert response.status_code == 200
    assert response.json() == []
    assert owm.requests == []


def test_geocode_upstream_failure_is_bad_gateway(client, owm):
    owm.reply = lambda request: httpx.Response(500, json={"message": "boom"})

    response = client.get("/geocode", params={"q": "London"})

    assert response.status_code == 502
    assert "error" in response.json()


def test_geocode_without_api_key(backend, owm):
    with _client(backend, owm, api_key=None) as test_client:
        response = test_client.get("/geocode", params={"q": "London"})

    assert response.status_code == 500
    assert response.json() == {"error": "API key not set"}
    assert owm.requests == []


def test_reverse_geocode(client, owm, geocode_payload):
    owm.reply = lambda request: httpx.Response(200, json=geocode_payload[:1])

    response = client.get("/geocode/reverse", params={"lat": "51.5", "lon": "-0.12"})

    assert response.status_code == 200
    assert response.json()[0]["name"] == "London"
    assert owm.requests[0].url.path == "/geo/1.0/reverse"
    assert owm.params["limit"] == "1"


def test_reverse_geocode_requires_both_coordinates(client, owm):
    response = client.get("/geocode/reverse", params={"lat": "51.5"})

    assert response.status_code == 422
    assert owm.requests == []


def test_health_and_info(client):
    assert client.get("/health").json() == {"status": "healthy", "service": "weather-dashboard"}

    info = client.get("/info").json()
    assert info["weather_backend"] == BACKEND_URL


def test_api_key_is_never_exposed(client):
    for path in ("/info", "/api", "/openapi.json"):
        assert "test-key" not in client.get(path).text
