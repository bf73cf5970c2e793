"""Reverse geocoding through OpenStreetMap Nominatim."""

import logging
from typing import Optional
import httpx
from revistete.core.config import settings
from revistete.core.errors import TransientError

logger = logging.getLogger(__name__)

# Nominatim spreads the locality name over several keys depending on size.
_CITY_KEYS = ("city", "town", "village", "municipality", "county", "state_district")


def _parse_address(data: dict, lat: float, lng: float) -> dict:
    address = data.get("address") if isinstance(data, dict) else None
    if not address:
        return {"city": None, "country": None, "address": f"{lat:.4f}, {lng:.4f}"}

    city = next((address[key] for key in _CITY_KEYS if address.get(key)), None)
    country = address.get("country")

    parts = []
    if address.get("road"):
        parts.append(address["road"])
    neighbourhood = address.get("suburb") or address.get("neighbourhood")
    if neighbourhood:
        parts.append(neighbourhood)
    if city:
        parts.append(city)

    full_address = ", ".join(parts) if parts else ", ".join(p for p in (city, country) if p)
    return {"city": city, "country": country, "address": full_address or None}


async def reverse_geocode(lat: float, lng: float, client: Optional[httpx.AsyncClient] = None) -> dict:
    """Resolve a coordinate to ``{city, country, address}``.

    Timeouts and upstream failures raise ``TransientError``; nothing is retried.
    """
    params = {
        "lat": lat,
        "lon": lng,
        "format": "json",
        "addressdetails": 1,
        "accept-language": "es",
    }
    headers = {"User-Agent": settings.GEOCODING_USER_AGENT}

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.GEOCODING_TIMEOUT_SECONDS)
    try:
        response = await client.get(settings.GEOCODING_URL, params=params, headers=headers)
        response.raise_for_status()
        data = response.json()
    except httpx.TimeoutException as exc:
        logger.warning("Reverse geocoding timed out", extra={"error_code": "GEOCODING_TIMEOUT"})
        raise TransientError() from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning(f"Reverse geocoding failed: {exc}", extra={"error_code": "GEOCODING_FAILED"})
        raise TransientError() from exc
    finally:
        if owns_client:
            await client.aclose()

    return _parse_address(data, lat, lng)
