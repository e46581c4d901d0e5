"""Error taxonomy for location resolution

Only ``InvalidInputError`` ever reaches a caller. Every other error is raised
by a provider attempt and absorbed by the fallback orchestrator.
"""

from typing import Optional


class ResolutionError(Exception):
    """Base class for all location resolution errors"""

    kind = "resolution_error"

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider


class InvalidInputError(ResolutionError):
    """Malformed address or out-of-range coordinates"""

    kind = "invalid_input"


class ProviderError(ResolutionError):
    """A provider attempt failed; the orchestrator moves to the next provider"""

    kind = "provider_error"


class TransientProviderError(ProviderError):
    """Network failure, provider 5xx, or an unparseable response"""

    kind = "transient_error"


class ProviderTimeoutError(ProviderError):
    """Provider exceeded its time budget"""

    kind = "timeout"

    def __init__(self, provider: str, seconds: float):
        super().__init__(f"{provider} did not answer within {seconds:g}s", provider=provider)
        self.seconds = seconds


class QuotaExceededError(ProviderError):
    """Provider refused the call because its quota is spent"""

    kind = "quota_exceeded"


class NotFoundError(ProviderError):
    """Provider answered but found no match"""

    kind = "not_found"
