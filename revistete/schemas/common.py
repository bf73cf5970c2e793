import math
from pydantic import BaseModel
from typing import List, Optional


class Envelope(BaseModel):
    success: bool = True


class MessageEnvelope(Envelope):
    message: str


class GeoPoint(BaseModel):
    """Stored point. ``coordinates`` is always ``[longitude, latitude]``."""
    type: str = "Point"
    coordinates: List[float]
    city: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None


def valid_coordinates(coordinates) -> bool:
    """True for a [lng, lat] pair of finite numbers that is not the (0, 0) "unset" sentinel."""
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) != 2:
        return False
    for value in coordinates:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value):
            return False
    lng, lat = coordinates
    return lng != 0 or lat != 0


def build_geo_point(raw, fallback: Optional[dict] = None, with_address: bool = True) -> Optional[dict]:
    """Normalize client location input into a stored geo-point, or None if unusable."""
    if not isinstance(raw, dict) or not valid_coordinates(raw.get("coordinates")):
        return None
    fallback = fallback or {}
    lng, lat = raw["coordinates"]
    point = {
        "type": "Point",
        "coordinates": [float(lng), float(lat)],
        "city": raw.get("city") or fallback.get("city"),
        "country": raw.get("country") or fallback.get("country"),
    }
    if with_address:
        point["address"] = raw.get("address") or fallback.get("address")
    return point


def stripped_non_empty(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v
