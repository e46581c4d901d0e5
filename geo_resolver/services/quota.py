"""Per-provider call budgets with lazily expiring time windows"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, Optional

import structlog

logger = structlog.get_logger()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ProviderState:
    """Call budget of one provider for the current window"""
    window_start: datetime
    window_duration: timedelta
    calls_limit: Optional[int]
    warning_threshold: Optional[int] = None
    calls_used: int = 0
    exhausted: bool = False
    by_operation: Dict[str, int] = field(default_factory=dict)

    @property
    def window_end(self) -> datetime:
        return self.window_start + self.window_duration

    @property
    def eligible(self) -> bool:
        if self.calls_limit is None:
            return True
        return not self.exhausted and self.calls_used < self.calls_limit

    @property
    def near_limit(self) -> bool:
        return (
            self.warning_threshold is not None
            and self.calls_limit is not None
            and self.calls_used >= self.warning_threshold
        )


class QuotaTracker:
    """Single owner of all provider quota state

    Every read and write goes through the lock; windows roll over lazily on
    access, so no background timer is needed. Providers that are not
    registered (the mathematical fallback) are always eligible and their
    usage is never recorded.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self._lock = threading.Lock()
        self._states: Dict[str, ProviderState] = {}

    def register(
        self,
        provider: str,
        calls_limit: Optional[int],
        window_duration: timedelta,
        warning_threshold: Optional[int] = None,
    ) -> None:
        """Start tracking a provider; ``calls_limit=None`` means unlimited"""
        with self._lock:
            self._states[provider] = ProviderState(
                window_start=self._clock(),
                window_duration=window_duration,
                calls_limit=calls_limit,
                warning_threshold=warning_threshold,
            )
        logger.info(
            "Quota registered",
            provider=provider,
            calls_limit=calls_limit,
            window_seconds=window_duration.total_seconds(),
        )

    def is_eligible(self, provider: str) -> bool:
        with self._lock:
            state = self._current(provider)
            return state is None or state.eligible

    def record_usage(self, provider: str, operation: str = "call") -> None:
        """Count one successful billable call"""
        with self._lock:
            state = self._current(provider)
            if state is None:
                return
            state.calls_used += 1
            state.by_operation[operation] = state.by_operation.get(operation, 0) + 1
            calls_used = state.calls_used
            crossed = state.calls_limit is not None and calls_used == state.calls_limit

        if crossed:
            logger.warning("Provider quota reached", provider=provider, calls_used=calls_used)

    def mark_exhausted(self, provider: str) -> None:
        """Provider itself reported its quota spent; skip it until the window rolls over"""
        with self._lock:
            state = self._current(provider)
            if state is None or state.calls_limit is None:
                return
            state.exhausted = True
        logger.warning("Provider reported quota exhaustion", provider=provider)

    def snapshot(self, provider: str) -> Optional[ProviderState]:
        """Copy of the provider's current state, or None when untracked"""
        with self._lock:
            state = self._current(provider)
            if state is None:
                return None
            return ProviderState(
                window_start=state.window_start,
                window_duration=state.window_duration,
                calls_limit=state.calls_limit,
                warning_threshold=state.warning_threshold,
                calls_used=state.calls_used,
                exhausted=state.exhausted,
                by_operation=dict(state.by_operation),
            )

    def providers(self) -> Iterable[str]:
        with self._lock:
            return list(self._states)

    def _current(self, provider: str) -> Optional[ProviderState]:
        """State for provider with the window rolled forward; caller holds the lock"""
        state = self._states.get(provider)
        if state is None:
            return None
        now = self._clock()
        if now >= state.window_end:
            elapsed_windows = (now - state.window_start) // state.window_duration
            state.window_start = state.window_start + elapsed_windows * state.window_duration
            state.calls_used = 0
            state.exhausted = False
            state.by_operation = {}
            logger.info("Quota window reset", provider=provider, window_start=state.window_start.isoformat())
        return state
