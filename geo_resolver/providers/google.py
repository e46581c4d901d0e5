"""Google Maps adapter (primary commercial provider)

Wraps the Geocoding API and the Distance Matrix API. Responses are parsed
through the schemas below and translated into ``RawCandidate`` /
``RawDistance`` immediately.
"""

from typing import Any, Dict, List, Optional

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from geo_resolver.errors import (
    InvalidInputError, NotFoundError, QuotaExceededError, TransientProviderError
)
from geo_resolver.providers.base import (
    AddressComponents, Coordinates, GeocodeQuery, ProviderAdapter, ProviderSource,
    RawCandidate, RawDistance, build_search_text
)

logger = structlog.get_logger()

# Provider certainty per geometry.location_type
LOCATION_TYPE_SIGNAL = {
    "ROOFTOP": 1.0,
    "RANGE_INTERPOLATED": 0.8,
    "GEOMETRIC_CENTER": 0.6,
    "APPROXIMATE": 0.4,
}

QUOTA_STATUSES = {"OVER_QUERY_LIMIT", "OVER_DAILY_LIMIT"}
NOT_FOUND_STATUSES = {"ZERO_RESULTS", "NOT_FOUND"}

# component type -> AddressComponents field, first match wins
COMPONENT_FIELDS = [
    ("country", "country"),
    ("administrative_area_level_1", "state"),
    ("locality", "city"),
    ("administrative_area_level_2", "district"),
    ("sublocality_level_1", "subdistrict"),
    ("postal_code", "postcode"),
    ("route", "road"),
    ("street_number", "house_number"),
]


class GoogleAddressComponent(BaseModel):
    long_name: str
    short_name: Optional[str] = None
    types: List[str] = Field(default_factory=list)


class GoogleLatLng(BaseModel):
    lat: float
    lng: float


class GoogleGeometry(BaseModel):
    location: GoogleLatLng
    location_type: Optional[str] = None


class GoogleGeocodeResult(BaseModel):
    formatted_address: str = ""
    geometry: GoogleGeometry
    address_components: List[GoogleAddressComponent] = Field(default_factory=list)
    place_id: Optional[str] = None
    types: List[str] = Field(default_factory=list)
    partial_match: bool = False


class GoogleGeocodeResponse(BaseModel):
    status: str
    results: List[GoogleGeocodeResult] = Field(default_factory=list)
    error_message: Optional[str] = None


class GoogleValue(BaseModel):
    value: float
    text: Optional[str] = None


class GoogleMatrixElement(BaseModel):
    status: str
    distance: Optional[GoogleValue] = None
    duration: Optional[GoogleValue] = None


class GoogleMatrixRow(BaseModel):
    elements: List[GoogleMatrixElement] = Field(default_factory=list)


class GoogleDistanceMatrixResponse(BaseModel):
    status: str
    rows: List[GoogleMatrixRow] = Field(default_factory=list)
    error_message: Optional[str] = None


class GoogleMapsAdapter(ProviderAdapter):
    """Primary provider backed by the Google Maps web services"""

    source = ProviderSource.PRIMARY
    name = "google"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str],
        geocoding_url: str = "https://maps.googleapis.com/maps/api/geocode/json",
        distance_matrix_url: str = "https://maps.googleapis.com/maps/api/distancematrix/json",
        region_code: str = "th",
        language: str = "th",
        country_name: Optional[str] = "Thailand",
        travel_mode: str = "driving",
    ):
        self.client = client
        self.api_key = api_key
        self.geocoding_url = geocoding_url
        self.distance_matrix_url = distance_matrix_url
        self.region_code = region_code
        self.language = language
        self.country_name = country_name
        self.travel_mode = travel_mode

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def geocode(self, query: GeocodeQuery) -> List[RawCandidate]:
        params = {
            "address": build_search_text(query, self.country_name),
            "region": self.region_code,
            "language": self.language,
        }
        if self.region_code:
            params["components"] = f"country:{self.region_code.upper()}"
        payload = await self._get(self.geocoding_url, params)
        response = self._parse(GoogleGeocodeResponse, payload)
        self._check_status(response.status, response.error_message)
        if not response.results:
            raise NotFoundError("Google returned no results", provider=self.name)
        return self._to_candidates(response.results)

    async def reverse(self, point: Coordinates) -> List[RawCandidate]:
        params = {
            "latlng": f"{point.lat},{point.lng}",
            "language": self.language,
        }
        payload = await self._get(self.geocoding_url, params)
        response = self._parse(GoogleGeocodeResponse, payload)
        self._check_status(response.status, response.error_message)
        if not response.results:
            raise NotFoundError("Google returned no address", provider=self.name)
        return self._to_candidates(response.results)

    async def distance(self, origin: Coordinates, destination: Coordinates) -> RawDistance:
        params = {
            "origins": f"{origin.lat},{origin.lng}",
            "destinations": f"{destination.lat},{destination.lng}",
            "units": "metric",
            "mode": self.travel_mode,
            "region": self.region_code,
            "language": self.language,
        }
        payload = await self._get(self.distance_matrix_url, params)
        response = self._parse(GoogleDistanceMatrixResponse, payload)
        self._check_status(response.status, response.error_message)

        if not response.rows or not response.rows[0].elements:
            raise NotFoundError("Distance matrix contained no elements", provider=self.name)
        element = response.rows[0].elements[0]
        if element.status != "OK" or element.distance is None:
            raise NotFoundError(f"No route found: {element.status}", provider=self.name)

        duration = int(round(element.duration.value)) if element.duration else None
        return RawDistance(distance_km=element.distance.value / 1000.0, duration_seconds=duration)

    async def _get(self, url: str, params: Dict[str, Any]) -> Any:
        """Issue one GET; the key is added here so it never reaches the logs"""
        logger.debug("Calling Google Maps", url=url, params=params)
        try:
            response = await self.client.get(url, params={**params, "key": self.api_key})
        except httpx.HTTPError as exc:
            raise TransientProviderError(f"Google request failed: {exc.__class__.__name__}", provider=self.name) from exc

        if response.status_code == 429:
            raise QuotaExceededError("Google rate limit reached", provider=self.name)
        if response.status_code >= 400:
            raise TransientProviderError(f"Google responded with HTTP {response.status_code}", provider=self.name)
        try:
            return response.json()
        except ValueError as exc:
            raise TransientProviderError("Google response was not JSON", provider=self.name) from exc

    def _parse(self, schema, payload: Any):
        try:
            return schema.model_validate(payload)
        except ValidationError as exc:
            raise TransientProviderError("Unexpected Google response shape", provider=self.name) from exc

    def _check_status(self, status: str, error_message: Optional[str]) -> None:
        if status == "OK":
            return
        detail = f"Google status {status}" + (f": {error_message}" if error_message else "")
        if status in QUOTA_STATUSES:
            raise QuotaExceededError(detail, provider=self.name)
        if status in NOT_FOUND_STATUSES:
            raise NotFoundError(detail, provider=self.name)
        if status == "INVALID_REQUEST":
            raise InvalidInputError(detail, provider=self.name)
        # REQUEST_DENIED, UNKNOWN_ERROR and anything new
        raise TransientProviderError(detail, provider=self.name)

    def _to_candidates(self, results: List[GoogleGeocodeResult]) -> List[RawCandidate]:
        candidates = []
        for result in results:
            candidates.append(RawCandidate(
                lat=result.geometry.location.lat,
                lng=result.geometry.location.lng,
                formatted_address=result.formatted_address,
                components=self._components(result.address_components),
                signal=LOCATION_TYPE_SIGNAL.get(result.geometry.location_type or "", 0.5),
                alternatives=len(results),
                partial_match=result.partial_match,
                place_id=result.place_id,
                place_type=result.types[0] if result.types else None,
            ))
        return candidates

    @staticmethod
    def _components(parts: List[GoogleAddressComponent]) -> AddressComponents:
        components = AddressComponents()
        for component_type, field_name in COMPONENT_FIELDS:
            for part in parts:
                if component_type in part.types:
                    setattr(components, field_name, part.long_name)
                    break
        return components
