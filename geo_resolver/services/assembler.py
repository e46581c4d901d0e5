"""Shapes resolutions into the outward response contract"""

from dataclasses import asdict
from typing import List, Optional, Sequence

from geo_resolver.providers.base import Coordinates, ProviderSource, RawDistance
from geo_resolver.schemas.distance import (
    DistanceCoordinates, DistanceData, DistanceMeta, DistanceResponse
)
from geo_resolver.schemas.geocoding import (
    AddressComponentsOut, GeocodeCandidate, GeocodeMeta, GeocodeResponse
)
from geo_resolver.schemas.common import Point
from geo_resolver.schemas.quota import ProviderQuotaStatus
from geo_resolver.services.orchestrator import Resolution
from geo_resolver.services.quota import QuotaTracker
from geo_resolver.services.scoring import ScoredCandidate

PROVIDER_LABELS = {
    ProviderSource.PRIMARY: "Google Maps",
    ProviderSource.SECONDARY: "OpenStreetMap",
    ProviderSource.MATHEMATICAL: "straight-line calculation",
}

SKIP_REASONS = {
    "quota_exceeded": "quota exhausted for this window",
    "timeout": "did not respond in time",
    "transient_error": "unavailable",
    "not_found": "found no match",
    "not_configured": "not configured",
}

STRAIGHT_LINE_WARNING = "Straight-line distance; actual road distance is usually 10% or more longer"
APPROXIMATE_LOCATION_WARNING = "Approximate location from offline province centroids"


class ResponseAssembler:
    """Builds response bodies and the caller-facing source/quota metadata"""

    def __init__(
        self,
        quota: QuotaTracker,
        max_candidates: int = 8,
        suspicious_km: float = 500.0,
        negligible_km: float = 0.1,
    ):
        self.quota = quota
        self.max_candidates = max_candidates
        self.suspicious_km = suspicious_km
        self.negligible_km = negligible_km

    def quota_message(self, resolution: Resolution) -> str:
        """Which provider answered, and why the ones above it did not"""
        answered = PROVIDER_LABELS[resolution.source]
        reasons = [
            f"{PROVIDER_LABELS[attempt.source]} {SKIP_REASONS.get(attempt.outcome, attempt.outcome)}"
            for attempt in resolution.skipped
        ]
        if reasons:
            message = f"Using {answered}: " + "; ".join(reasons)
        elif resolution.source == ProviderSource.PRIMARY:
            message = f"Using {answered} for highest accuracy"
        else:
            message = f"Using {answered}"

        usage = self._primary_usage_note()
        return f"{message} ({usage})" if usage else message

    def geocode_response(self, resolution: Resolution, ranked: Sequence[ScoredCandidate]) -> GeocodeResponse:
        candidates = [self._candidate(scored) for scored in ranked[:self.max_candidates]]
        warnings: List[str] = []
        if resolution.source == ProviderSource.MATHEMATICAL:
            warnings.append(APPROXIMATE_LOCATION_WARNING)
        return GeocodeResponse(
            data=candidates,
            message=f"Found {len(candidates)} result(s)",
            meta=GeocodeMeta(
                source=resolution.source.value,
                is_google_maps=resolution.source == ProviderSource.PRIMARY,
                quota_message=self.quota_message(resolution),
                warnings=warnings,
            ),
        )

    def distance_response(
        self,
        resolution: Resolution,
        origin: Coordinates,
        destination: Coordinates,
    ) -> DistanceResponse:
        raw: RawDistance = resolution.value
        distance = round(raw.distance_km, 2)
        warning = self.distance_warning(distance, resolution.source)
        message = f"Distance: {distance} km" + (f" ({warning})" if warning else "")
        return DistanceResponse(
            data=DistanceData(
                distance=distance,
                duration=raw.duration_seconds,
                source=resolution.source.value,
                warning=warning,
            ),
            message=message,
            meta=DistanceMeta(
                coordinates=DistanceCoordinates(
                    origin=Point(lat=origin.lat, lng=origin.lng),
                    destination=Point(lat=destination.lat, lng=destination.lng),
                ),
                source=resolution.source.value,
                is_google_maps=resolution.source == ProviderSource.PRIMARY,
                quota_message=self.quota_message(resolution),
            ),
        )

    def distance_warning(self, distance_km: float, source: ProviderSource) -> Optional[str]:
        warnings = []
        if source == ProviderSource.MATHEMATICAL:
            warnings.append(STRAIGHT_LINE_WARNING)
        if distance_km > self.suspicious_km:
            warnings.append("Distance looks too large; check the coordinates")
        elif distance_km < self.negligible_km:
            warnings.append("Distance is very small; origin and destination may be the same point")
        return "; ".join(warnings) or None

    def quota_status(self) -> List[ProviderQuotaStatus]:
        statuses = []
        for provider in self.quota.providers():
            state = self.quota.snapshot(provider)
            if state is None:
                continue
            limit = state.calls_limit
            statuses.append(ProviderQuotaStatus(
                provider=provider,
                calls_used=state.calls_used,
                calls_limit=limit,
                remaining=max(0, limit - state.calls_used) if limit is not None else None,
                percentage_used=round(state.calls_used / limit * 100) if limit else None,
                warning_threshold=state.warning_threshold,
                is_near_limit=state.near_limit,
                is_quota_exceeded=not state.eligible,
                window_start=state.window_start,
                window_resets_at=state.window_end,
                usage_by_operation=state.by_operation,
            ))
        return statuses

    def _primary_usage_note(self) -> Optional[str]:
        state = self.quota.snapshot(ProviderSource.PRIMARY.value)
        if state is None or state.calls_limit is None:
            return None
        usage = f"{state.calls_used}/{state.calls_limit}"
        if not state.eligible:
            return f"Google Maps quota exceeded: {usage} this window"
        if state.near_limit:
            return f"Google Maps quota nearly used: {usage} this window"
        return None

    @staticmethod
    def _candidate(scored: ScoredCandidate) -> GeocodeCandidate:
        raw = scored.raw
        return GeocodeCandidate(
            lat=raw.lat,
            lng=raw.lng,
            formatted_address=raw.formatted_address,
            address_components=AddressComponentsOut(**asdict(raw.components)),
            match_level=scored.match_level.value,
            confidence=scored.confidence,
            final_score=scored.final_score,
            source=scored.source.value,
            place_id=raw.place_id,
            place_type=raw.place_type,
        )
