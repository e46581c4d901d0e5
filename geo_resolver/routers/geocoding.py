"""Geocoding endpoints"""

from fastapi import APIRouter, Depends, Query

from geo_resolver.auth import verify_api_key
from geo_resolver.dependencies import get_location_service
from geo_resolver.providers.base import Coordinates
from geo_resolver.schemas.geocoding import GeocodeRequest, GeocodeResponse
from geo_resolver.services.location import LocationService

router = APIRouter()


@router.post("", response_model=GeocodeResponse)
async def geocode_address(
    payload: GeocodeRequest,
    service: LocationService = Depends(get_location_service),
    api_key: str = Depends(verify_api_key)
):
    """
    Resolve a free-text address into ranked candidates.

    Providers are tried in priority order (Google Maps, OpenStreetMap,
    offline gazetteer); the first candidate is the recommended result and
    ``meta`` says which provider answered and why.
    """
    return await service.resolve_address(payload.address, payload.company_name)


@router.get("/reverse", response_model=GeocodeResponse)
async def reverse_geocode(
    lat: float = Query(..., description="Latitude (WGS84 degrees)"),
    lng: float = Query(..., description="Longitude (WGS84 degrees)"),
    service: LocationService = Depends(get_location_service),
    api_key: str = Depends(verify_api_key)
):
    """Resolve coordinates into the address(es) found there"""
    return await service.reverse_geocode(Coordinates(lat, lng))
