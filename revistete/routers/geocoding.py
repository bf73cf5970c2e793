from fastapi import APIRouter, Query
from revistete.schemas.geocoding import ReverseGeocodeResponse
from revistete.services.geocoding import reverse_geocode

router = APIRouter(prefix="/geocoding", tags=["Geocoding"])


@router.get("/reverse", response_model=ReverseGeocodeResponse)
async def reverse(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
):
    """Pass-through to the reverse geocoder; coordinates arrive as lat/lng query params."""
    return ReverseGeocodeResponse(**await reverse_geocode(lat, lng))
