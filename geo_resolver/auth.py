"""API key authentication"""

from typing import Optional

import structlog
from fastapi import HTTPException, Header, Request

from geo_resolver.config import settings

logger = structlog.get_logger()


async def verify_api_key(
    request: Request,
    x_api_key: Optional[str] = Header(None, alias="X-API-Key")
) -> str:
    """Reject requests without a configured X-API-Key header"""
    if not x_api_key:
        raise HTTPException(status_code=401, detail="API key required")

    if x_api_key not in settings.get_api_keys():
        logger.warning(
            "Rejected API key",
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )
        raise HTTPException(status_code=401, detail="Invalid API key")

    return x_api_key
