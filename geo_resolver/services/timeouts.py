"""Bounded deadlines for provider attempts"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from geo_resolver.errors import ProviderTimeoutError

T = TypeVar("T")


async def with_timeout(
    call: Callable[[], Awaitable[T]],
    seconds: Optional[float],
    provider: str = "provider",
) -> T:
    """
    Run ``call`` under a deadline

    On expiry the task running the call is cancelled, which aborts the
    underlying httpx request and returns its connection to the pool, and
    ``ProviderTimeoutError`` is raised. ``seconds=None`` runs without a
    deadline (the mathematical provider).
    """
    if seconds is None:
        return await call()
    try:
        return await asyncio.wait_for(call(), timeout=seconds)
    except asyncio.TimeoutError as exc:
        raise ProviderTimeoutError(provider, seconds) from exc
