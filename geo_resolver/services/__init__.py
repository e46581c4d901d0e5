"""Resolution services: quota, timeouts, fallback, scoring and response assembly"""

from .quota import QuotaTracker, ProviderState
from .timeouts import with_timeout
from .orchestrator import FallbackOrchestrator, ProviderSlot, Resolution, Attempt
from .scoring import ScoringEngine, ScoredCandidate, MatchLevel
from .assembler import ResponseAssembler
from .location import LocationService

__all__ = [
    "QuotaTracker", "ProviderState",
    "with_timeout",
    "FallbackOrchestrator", "ProviderSlot", "Resolution", "Attempt",
    "ScoringEngine", "ScoredCandidate", "MatchLevel",
    "ResponseAssembler",
    "LocationService",
]
