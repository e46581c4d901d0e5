"""Sequential provider fallback

The chain is an ordered list of ``ProviderSlot``s. Each request walks it in
priority order, one provider in flight at a time:

1. Provider not configured or out of quota: skip without a network call
2. Call the adapter under its time budget
3. Success: record usage and stop
4. Timeout, transient error, not found, provider-reported quota: next slot
5. Invalid input: abort, no other provider will read it better

The last slot must be an unmetered provider that cannot fail, which is what
guarantees every well-formed request a result.
"""

import functools
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

import structlog

from geo_resolver.errors import InvalidInputError, ProviderError, QuotaExceededError
from geo_resolver.metrics import PROVIDER_ATTEMPTS, PROVIDER_LATENCY, RESOLUTIONS
from geo_resolver.providers.base import (
    Coordinates, GeocodeQuery, ProviderAdapter, ProviderSource, RawCandidate, RawDistance
)
from geo_resolver.services.quota import QuotaTracker
from geo_resolver.services.timeouts import with_timeout

logger = structlog.get_logger()

T = TypeVar("T")

SUCCESS = "success"
NOT_CONFIGURED = "not_configured"
QUOTA_EXCEEDED = QuotaExceededError.kind


@dataclass
class ProviderSlot:
    """One link of the chain: an adapter and its time budget in seconds"""
    adapter: ProviderAdapter
    timeout: Optional[float] = None

    @property
    def source(self) -> ProviderSource:
        return self.adapter.source


@dataclass
class Attempt:
    source: ProviderSource
    outcome: str
    detail: Optional[str] = None
    elapsed_ms: int = 0


@dataclass
class Resolution(Generic[T]):
    """Result of walking the chain, with the attempts that led to it"""
    source: ProviderSource
    value: T
    attempts: List[Attempt] = field(default_factory=list)

    @property
    def skipped(self) -> List[Attempt]:
        return [attempt for attempt in self.attempts if attempt.outcome != SUCCESS]


class FallbackOrchestrator:
    """Walks the provider chain for geocoding, reverse geocoding and distance"""

    def __init__(self, chain: Sequence[ProviderSlot], quota: QuotaTracker):
        if not chain:
            raise ValueError("Provider chain is empty")
        terminal = chain[-1].adapter
        if terminal.metered or not terminal.is_configured:
            raise ValueError(
                f"Provider chain must end in an unmetered, always-available provider, got {terminal.name}"
            )
        self.chain = list(chain)
        self.quota = quota

    async def geocode(self, query: GeocodeQuery) -> Resolution[List[RawCandidate]]:
        return await self._resolve("geocoding", lambda adapter: adapter.geocode(query))

    async def reverse(self, point: Coordinates) -> Resolution[List[RawCandidate]]:
        return await self._resolve("reverse", lambda adapter: adapter.reverse(point))

    async def distance(self, origin: Coordinates, destination: Coordinates) -> Resolution[RawDistance]:
        return await self._resolve("distance", lambda adapter: adapter.distance(origin, destination))

    async def _resolve(
        self,
        operation: str,
        call: Callable[[ProviderAdapter], Awaitable[T]],
    ) -> Resolution[T]:
        attempts: List[Attempt] = []

        for slot in self.chain:
            adapter = slot.adapter
            source = slot.source

            if not adapter.is_configured:
                self._skip(operation, attempts, source, NOT_CONFIGURED, f"{adapter.name} is not configured")
                continue
            if adapter.metered and not self.quota.is_eligible(source.value):
                self._skip(operation, attempts, source, QUOTA_EXCEEDED, f"{adapter.name} quota exhausted for this window")
                continue

            started = time.monotonic()
            try:
                value = await with_timeout(functools.partial(call, adapter), slot.timeout, provider=adapter.name)
            except InvalidInputError as exc:
                PROVIDER_ATTEMPTS.labels(operation=operation, source=source.value, outcome=exc.kind).inc()
                logger.warning("Provider rejected input", operation=operation, provider=adapter.name, error=exc.message)
                raise
            except ProviderError as exc:
                elapsed = time.monotonic() - started
                PROVIDER_LATENCY.labels(operation=operation, source=source.value).observe(elapsed)
                if isinstance(exc, QuotaExceededError):
                    self.quota.mark_exhausted(source.value)
                attempts.append(Attempt(source, exc.kind, exc.message, int(elapsed * 1000)))
                PROVIDER_ATTEMPTS.labels(operation=operation, source=source.value, outcome=exc.kind).inc()
                logger.warning(
                    "Provider attempt failed, falling back",
                    operation=operation,
                    provider=adapter.name,
                    outcome=exc.kind,
                    error=exc.message,
                    elapsed_ms=int(elapsed * 1000),
                )
                continue

            elapsed = time.monotonic() - started
            PROVIDER_LATENCY.labels(operation=operation, source=source.value).observe(elapsed)
            if adapter.metered:
                self.quota.record_usage(source.value, operation)
            attempts.append(Attempt(source, SUCCESS, elapsed_ms=int(elapsed * 1000)))
            PROVIDER_ATTEMPTS.labels(operation=operation, source=source.value, outcome=SUCCESS).inc()
            RESOLUTIONS.labels(operation=operation, source=source.value).inc()
            logger.info(
                "Resolved",
                operation=operation,
                provider=adapter.name,
                attempts=len(attempts),
                elapsed_ms=int(elapsed * 1000),
            )
            return Resolution(source=source, value=value, attempts=attempts)

        # Unreachable while the terminal provider keeps its no-failure contract
        raise RuntimeError(f"Every provider failed for {operation}")

    @staticmethod
    def _skip(operation: str, attempts: List[Attempt], source: ProviderSource, outcome: str, detail: str) -> None:
        attempts.append(Attempt(source, outcome, detail))
        PROVIDER_ATTEMPTS.labels(operation=operation, source=source.value, outcome=outcome).inc()
        logger.info("Provider skipped", operation=operation, source=source.value, reason=outcome)
