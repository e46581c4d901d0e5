"""Common Pydantic schemas"""

from typing import Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(..., description="Error message")
    code: Optional[str] = Field(None, description="Error code")
    trace_id: Optional[str] = Field(None, description="Request trace ID")


class Point(BaseModel):
    """WGS84 coordinate pair"""
    lat: float
    lng: float
