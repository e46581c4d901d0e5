"""Pydantic schemas for quota status"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ProviderQuotaStatus(BaseModel):
    provider: str
    calls_used: int
    calls_limit: Optional[int] = Field(None, description="None means unlimited")
    remaining: Optional[int] = None
    percentage_used: Optional[int] = None
    warning_threshold: Optional[int] = None
    is_near_limit: bool
    is_quota_exceeded: bool
    window_start: datetime
    window_resets_at: datetime
    usage_by_operation: Dict[str, int] = Field(default_factory=dict)


class QuotaStatusResponse(BaseModel):
    success: bool = True
    data: List[ProviderQuotaStatus]
