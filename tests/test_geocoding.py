"""Reverse geocoding against a mocked Nominatim."""

import httpx
import pytest

from conftest import API
from revistete.core.errors import TransientError
from revistete.routers import geocoding as geocoding_router
from revistete.services.geocoding import reverse_geocode


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_reverse_geocode_builds_address():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["agent"] = request.headers["user-agent"]
        return httpx.Response(200, json={"address": {
            "road": "Calle de Alcalá",
            "suburb": "Salamanca",
            "city": "Madrid",
            "country": "España",
        }})

    async with _client(handler) as client:
        result = await reverse_geocode(40.42, -3.68, client=client)

    assert result == {
        "city": "Madrid",
        "country": "España",
        "address": "Calle de Alcalá, Salamanca, Madrid",
    }
    assert seen["params"]["lat"] == "40.42"
    assert seen["params"]["lon"] == "-3.68"
    assert seen["agent"] == "ReVistete-App"


@pytest.mark.asyncio
async def test_reverse_geocode_falls_back_to_town():
    def handler(request):
        return httpx.Response(200, json={"address": {"town": "Cercedilla", "country": "España"}})

    async with _client(handler) as client:
        result = await reverse_geocode(40.74, -4.06, client=client)

    assert result["city"] == "Cercedilla"
    assert result["address"] == "Cercedilla"


@pytest.mark.asyncio
async def test_reverse_geocode_without_address_returns_coordinates():
    def handler(request):
        return httpx.Response(200, json={"error": "Unable to geocode"})

    async with _client(handler) as client:
        result = await reverse_geocode(40.123456, -3.5, client=client)

    assert result == {"city": None, "country": None, "address": "40.1235, -3.5000"}


@pytest.mark.asyncio
async def test_reverse_geocode_timeout_is_transient():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    async with _client(handler) as client:
        with pytest.raises(TransientError):
            await reverse_geocode(40.0, -3.0, client=client)


@pytest.mark.asyncio
async def test_reverse_geocode_upstream_error_is_transient():
    def handler(request):
        return httpx.Response(503)

    async with _client(handler) as client:
        with pytest.raises(TransientError):
            await reverse_geocode(40.0, -3.0, client=client)


def test_reverse_endpoint(client, monkeypatch):
    async def fake_reverse(lat, lng):
        return {"city": "Sevilla", "country": "España", "address": "Sevilla, España"}

    monkeypatch.setattr(geocoding_router, "reverse_geocode", fake_reverse)
    response = client.get(f"{API}/geocoding/reverse", params={"lat": 37.38, "lng": -5.98})
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "city": "Sevilla",
        "country": "España",
        "address": "Sevilla, España",
    }


def test_reverse_endpoint_reports_transient_failure(client, monkeypatch):
    async def failing_reverse(lat, lng):
        raise TransientError()

    monkeypatch.setattr(geocoding_router, "reverse_geocode", failing_reverse)
    response = client.get(f"{API}/geocoding/reverse", params={"lat": 37.38, "lng": -5.98})
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Service temporarily unavailable, please try again",
    }


def test_reverse_endpoint_validates_range(client):
    response = client.get(f"{API}/geocoding/reverse", params={"lat": 120, "lng": 0})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "lat"
