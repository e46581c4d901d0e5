"""Pure-math provider: haversine distance and an offline province gazetteer

This is the unconditional last link of every provider chain. It performs no
I/O, consumes no quota and always produces a result for validated input.
"""

import math
from typing import List

from geo_resolver.providers.base import (
    AddressComponents, Coordinates, GeocodeQuery, ProviderAdapter, ProviderSource,
    RawCandidate, RawDistance
)
from geo_resolver.providers.gazetteer import COUNTRY, PROVINCES, Place
from geo_resolver.text import mentions, normalize

EARTH_RADIUS_KM = 6371.0

PROVINCE_SIGNAL = 0.3
COUNTRY_SIGNAL = 0.05


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points on Earth

    Args:
        lat1, lng1: Latitude and longitude of first point in degrees
        lat2, lng2: Latitude and longitude of second point in degrees

    Returns:
        Distance in kilometres
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlng = math.radians(lng2 - lng1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


class MathematicalAdapter(ProviderAdapter):
    """Straight-line calculator used when every network provider has failed"""

    source = ProviderSource.MATHEMATICAL
    name = "mathematical"
    metered = False

    async def distance(self, origin: Coordinates, destination: Coordinates) -> RawDistance:
        return RawDistance(
            distance_km=haversine_km(origin.lat, origin.lng, destination.lat, destination.lng),
            duration_seconds=None,
        )

    async def geocode(self, query: GeocodeQuery) -> List[RawCandidate]:
        matches = self.find_provinces(query.address)
        if not matches:
            return [self._candidate(COUNTRY, COUNTRY_SIGNAL, is_country=True)]
        return [self._candidate(place, PROVINCE_SIGNAL) for place in matches]

    async def reverse(self, point: Coordinates) -> List[RawCandidate]:
        nearest = min(PROVINCES, key=lambda place: haversine_km(point.lat, point.lng, place.lat, place.lng))
        return [self._candidate(nearest, PROVINCE_SIGNAL)]

    @staticmethod
    def find_provinces(address: str) -> List[Place]:
        """Provinces named in the address, the one mentioned last first"""
        text = normalize(address).replace(" ", "")
        found = []
        for place in PROVINCES:
            positions = [
                text.rfind(normalize(name).replace(" ", "")) for name in place.names if mentions(address, name)
            ]
            if positions:
                found.append((max(positions), place))
        found.sort(key=lambda item: item[0], reverse=True)
        return [place for _, place in found]

    @staticmethod
    def _candidate(place: Place, signal: float, is_country: bool = False) -> RawCandidate:
        if is_country:
            components = AddressComponents(country=place.name)
            formatted = place.name
        else:
            components = AddressComponents(country=COUNTRY.name, state=place.name)
            formatted = f"{place.name}, {COUNTRY.name}"
        return RawCandidate(
            lat=place.lat,
            lng=place.lng,
            formatted_address=formatted,
            components=components,
            signal=signal,
            place_type="country" if is_country else "province_centroid",
        )
