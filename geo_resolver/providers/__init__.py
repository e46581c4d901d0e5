"""Provider adapters, one per data source"""

from .base import (
    AddressComponents, Coordinates, GeocodeQuery, ProviderAdapter, ProviderSource,
    RawCandidate, RawDistance
)
from .google import GoogleMapsAdapter
from .openstreetmap import OpenStreetMapAdapter
from .mathematical import MathematicalAdapter, haversine_km

__all__ = [
    "AddressComponents", "Coordinates", "GeocodeQuery", "ProviderAdapter", "ProviderSource",
    "RawCandidate", "RawDistance",
    "GoogleMapsAdapter", "OpenStreetMapAdapter", "MathematicalAdapter", "haversine_km",
]
