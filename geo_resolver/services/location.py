"""Location resolution service: the two capabilities callers use

``resolve_address(query) -> ranked candidates`` and
``resolve_distance(origin, destination) -> distance/duration``, plus reverse
geocoding and quota status.
"""

from datetime import timedelta
from typing import List, Optional

import httpx
import structlog

from geo_resolver.config import Settings
from geo_resolver.providers import (
    Coordinates, GeocodeQuery, GoogleMapsAdapter, MathematicalAdapter, OpenStreetMapAdapter,
    ProviderAdapter, ProviderSource
)
from geo_resolver.schemas.distance import DistanceResponse
from geo_resolver.schemas.geocoding import GeocodeResponse
from geo_resolver.schemas.quota import ProviderQuotaStatus
from geo_resolver.services.assembler import ResponseAssembler
from geo_resolver.services.orchestrator import FallbackOrchestrator, ProviderSlot
from geo_resolver.services.quota import QuotaTracker
from geo_resolver.services.scoring import ScoringEngine

logger = structlog.get_logger()


class LocationService:
    """Validates input, runs the fallback chain and assembles the response"""

    def __init__(
        self,
        orchestrator: FallbackOrchestrator,
        scoring: ScoringEngine,
        assembler: ResponseAssembler,
    ):
        self.orchestrator = orchestrator
        self.scoring = scoring
        self.assembler = assembler

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: httpx.AsyncClient,
        quota: Optional[QuotaTracker] = None,
    ) -> "LocationService":
        """Wire adapters, quota budgets and the provider chain from configuration"""
        quota = quota or QuotaTracker()
        window = timedelta(days=settings.quota_window_days)
        quota.register(
            ProviderSource.PRIMARY.value,
            calls_limit=settings.google_quota_limit,
            window_duration=window,
            warning_threshold=settings.google_quota_warning,
        )
        quota.register(
            ProviderSource.SECONDARY.value,
            calls_limit=settings.secondary_quota_limit,
            window_duration=window,
        )

        adapters = {
            ProviderSource.PRIMARY.value: GoogleMapsAdapter(
                client,
                api_key=settings.google_maps_api_key,
                geocoding_url=settings.google_geocoding_url,
                distance_matrix_url=settings.google_distance_matrix_url,
                region_code=settings.region_code,
                language=settings.language,
                country_name=settings.country_name,
                travel_mode=settings.google_travel_mode,
            ),
            ProviderSource.SECONDARY.value: OpenStreetMapAdapter(
                client,
                nominatim_url=settings.nominatim_url,
                osrm_url=settings.osrm_url,
                user_agent=settings.nominatim_user_agent,
                email=settings.nominatim_email,
                region_code=settings.region_code,
                country_name=settings.country_name,
                result_limit=settings.nominatim_result_limit,
                profile=settings.osrm_profile,
            ),
            ProviderSource.MATHEMATICAL.value: MathematicalAdapter(),
        }
        timeouts = {
            ProviderSource.PRIMARY.value: settings.primary_timeout_seconds,
            ProviderSource.SECONDARY.value: settings.secondary_timeout_seconds,
            ProviderSource.MATHEMATICAL.value: None,
        }
        chain = [ProviderSlot(adapters[name], timeouts[name]) for name in settings.get_provider_order()]

        logger.info(
            "Provider chain configured",
            order=[slot.source.value for slot in chain],
            google_configured=adapters[ProviderSource.PRIMARY.value].is_configured,
        )
        return cls(
            orchestrator=FallbackOrchestrator(chain, quota),
            scoring=ScoringEngine.from_settings(settings),
            assembler=ResponseAssembler(
                quota,
                max_candidates=settings.max_candidates,
                suspicious_km=settings.distance_suspicious_km,
                negligible_km=settings.distance_negligible_km,
            ),
        )

    @property
    def quota(self) -> QuotaTracker:
        return self.orchestrator.quota

    @property
    def adapters(self) -> List[ProviderAdapter]:
        return [slot.adapter for slot in self.orchestrator.chain]

    async def resolve_address(self, address: Optional[str], company_name: Optional[str] = None) -> GeocodeResponse:
        """Ranked candidates for a free-text address; raises InvalidInputError"""
        query = GeocodeQuery(address=address, company_name=company_name)
        resolution = await self.orchestrator.geocode(query)
        ranked = self.scoring.rank(query, resolution.value, resolution.source)
        return self.assembler.geocode_response(resolution, ranked)

    async def reverse_geocode(self, point: Coordinates) -> GeocodeResponse:
        resolution = await self.orchestrator.reverse(point)
        ranked = self.scoring.rank_reverse(resolution.value, resolution.source)
        return self.assembler.geocode_response(resolution, ranked)

    async def resolve_distance(self, origin: Coordinates, destination: Coordinates) -> DistanceResponse:
        resolution = await self.orchestrator.distance(origin, destination)
        return self.assembler.distance_response(resolution, origin, destination)

    def quota_status(self) -> List[ProviderQuotaStatus]:
        return self.assembler.quota_status()
