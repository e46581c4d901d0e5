"""OpenStreetMap adapter (secondary community provider)

Geocoding goes to Nominatim, routing to OSRM. Nominatim's usage policy asks
for an identifying User-Agent on every request.
"""

from typing import Any, Dict, List, Optional

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from geo_resolver.errors import NotFoundError, QuotaExceededError, TransientProviderError
from geo_resolver.providers.base import (
    AddressComponents, Coordinates, GeocodeQuery, ProviderAdapter, ProviderSource,
    RawCandidate, RawDistance, build_search_text
)

logger = structlog.get_logger()


class NominatimAddress(BaseModel):
    country: Optional[str] = None
    state: Optional[str] = None
    province: Optional[str] = None
    city: Optional[str] = None
    town: Optional[str] = None
    village: Optional[str] = None
    county: Optional[str] = None
    district: Optional[str] = None
    suburb: Optional[str] = None
    subdistrict: Optional[str] = None
    quarter: Optional[str] = None
    postcode: Optional[str] = None
    road: Optional[str] = None
    house_number: Optional[str] = None


class NominatimPlace(BaseModel):
    lat: float
    lon: float
    display_name: str = ""
    place_id: Optional[int] = None
    importance: Optional[float] = None
    type: Optional[str] = None
    osm_type: Optional[str] = None
    address: NominatimAddress = Field(default_factory=NominatimAddress)


class OSRMRoute(BaseModel):
    distance: float  # meters
    duration: Optional[float] = None  # seconds


class OSRMRouteResponse(BaseModel):
    code: str
    message: Optional[str] = None
    routes: List[OSRMRoute] = Field(default_factory=list)


class OpenStreetMapAdapter(ProviderAdapter):
    """Secondary provider backed by public Nominatim and OSRM instances"""

    source = ProviderSource.SECONDARY
    name = "openstreetmap"

    def __init__(
        self,
        client: httpx.AsyncClient,
        nominatim_url: str = "https://nominatim.openstreetmap.org",
        osrm_url: str = "https://router.project-osrm.org",
        user_agent: str = "Logistics-System/1.0",
        email: Optional[str] = None,
        region_code: Optional[str] = "th",
        country_name: Optional[str] = "Thailand",
        result_limit: int = 10,
        profile: str = "driving",
    ):
        self.client = client
        self.nominatim_url = nominatim_url.rstrip("/")
        self.osrm_url = osrm_url.rstrip("/")
        self.user_agent = user_agent
        self.email = email
        self.region_code = region_code
        self.country_name = country_name
        self.result_limit = result_limit
        self.profile = profile

    async def geocode(self, query: GeocodeQuery) -> List[RawCandidate]:
        params: Dict[str, Any] = {
            "q": build_search_text(query, self.country_name),
            "format": "json",
            "limit": max(self.result_limit, 1),
            "accept-language": "th,en",
            "addressdetails": 1,
        }
        if self.region_code:
            params["countrycodes"] = self.region_code
        if self.email:
            params["email"] = self.email

        payload = await self._get(f"{self.nominatim_url}/search", params)
        if not isinstance(payload, list):
            raise TransientProviderError("Nominatim search did not return a list", provider=self.name)
        places = [self._parse(NominatimPlace, item) for item in payload]
        if not places:
            raise NotFoundError("Nominatim found no match", provider=self.name)
        return [self._to_candidate(place, len(places)) for place in places]

    async def reverse(self, point: Coordinates) -> List[RawCandidate]:
        params: Dict[str, Any] = {
            "lat": point.lat,
            "lon": point.lng,
            "format": "json",
            "accept-language": "th,en",
            "addressdetails": 1,
        }
        if self.email:
            params["email"] = self.email

        payload = await self._get(f"{self.nominatim_url}/reverse", params)
        if not isinstance(payload, dict):
            raise TransientProviderError("Nominatim reverse did not return an object", provider=self.name)
        if payload.get("error"):
            raise NotFoundError(f"Nominatim reverse: {payload['error']}", provider=self.name)
        return [self._to_candidate(self._parse(NominatimPlace, payload), 1)]

    async def distance(self, origin: Coordinates, destination: Coordinates) -> RawDistance:
        # OSRM expects lon,lat order
        coordinates = f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        url = f"{self.osrm_url}/route/v1/{self.profile}/{coordinates}"
        payload = await self._get(url, {"overview": "false", "steps": "false"})
        response = self._parse(OSRMRouteResponse, payload)

        if response.code == "NoRoute" or (response.code == "Ok" and not response.routes):
            raise NotFoundError("OSRM found no route", provider=self.name)
        if response.code != "Ok":
            raise TransientProviderError(
                f"OSRM error {response.code}: {response.message or 'unknown'}", provider=self.name
            )

        route = response.routes[0]
        duration = int(round(route.duration)) if route.duration is not None else None
        return RawDistance(distance_km=route.distance / 1000.0, duration_seconds=duration)

    async def _get(self, url: str, params: Dict[str, Any]) -> Any:
        logger.debug("Calling OpenStreetMap", url=url, params=params)
        try:
            response = await self.client.get(url, params=params, headers={"User-Agent": self.user_agent})
        except httpx.HTTPError as exc:
            raise TransientProviderError(f"OpenStreetMap request failed: {exc.__class__.__name__}", provider=self.name) from exc

        if response.status_code == 429:
            raise QuotaExceededError("OpenStreetMap rate limit reached", provider=self.name)
        # OSRM answers 400 with a JSON body for NoRoute/InvalidQuery
        if response.status_code >= 400 and not (response.status_code == 400 and "/route/" in url):
            raise TransientProviderError(f"OpenStreetMap responded with HTTP {response.status_code}", provider=self.name)
        try:
            return response.json()
        except ValueError as exc:
            raise TransientProviderError("OpenStreetMap response was not JSON", provider=self.name) from exc

    def _parse(self, schema, payload: Any):
        try:
            return schema.model_validate(payload)
        except ValidationError as exc:
            raise TransientProviderError("Unexpected OpenStreetMap response shape", provider=self.name) from exc

    @staticmethod
    def _to_candidate(place: NominatimPlace, alternatives: int) -> RawCandidate:
        address = place.address
        components = AddressComponents(
            country=address.country,
            state=address.state or address.province,
            city=address.city or address.town or address.village,
            district=address.county or address.district,
            subdistrict=address.suburb or address.subdistrict or address.quarter,
            postcode=address.postcode,
            road=address.road,
            house_number=address.house_number,
        )
        return RawCandidate(
            lat=place.lat,
            lng=place.lon,
            formatted_address=place.display_name,
            components=components,
            signal=place.importance,
            alternatives=alternatives,
            place_id=str(place.place_id) if place.place_id is not None else None,
            place_type=place.type,
        )
