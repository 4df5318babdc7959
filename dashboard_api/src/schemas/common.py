from __future__ import annotations

import math
from typing import Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DataSource = Literal["database", "fallback"]


# PUBLIC_INTERFACE
class ApiResponse(BaseModel, Generic[T]):
    """
    Envelope wrapping every JSON response.

    success=True responses carry `data` and never `error`; success=False
    responses carry `error` and never `data`. `source`/`degraded` tell operators
    when fallback data was served instead of store data.
    """
    success: bool = Field(..., description="Whether the request succeeded")
    data: Optional[T] = Field(default=None, description="Payload on success")
    error: Optional[str] = Field(default=None, description="Human readable error on failure")
    message: Optional[str] = Field(default=None, description="Optional informational message")
    source: Optional[DataSource] = Field(default=None, description="Where the data came from")
    degraded: Optional[bool] = Field(default=None, description="True when fallback data is served")

    @classmethod
    def ok(cls, data: T, source: Optional[DataSource] = None) -> "ApiResponse[T]":
        if source is None:
            return cls(success=True, data=data)
        return cls(success=True, data=data, source=source, degraded=source == "fallback")

    @classmethod
    def fail(cls, error: str) -> "ApiResponse[T]":
        return cls(success=False, error=error)


class PaginationInfo(BaseModel):
    """Page metadata returned with every list."""
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    totalPages: int = Field(..., ge=0)

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        return cls(page=page, limit=limit, total=total, totalPages=math.ceil(total / limit))


# PUBLIC_INTERFACE
class PaginatedResponse(BaseModel, Generic[T]):
    """A page of items with its pagination metadata."""
    data: List[T] = Field(default_factory=list)
    pagination: PaginationInfo


class HealthResponse(BaseModel):
    """Liveness payload (not wrapped in `data`)."""
    success: bool = Field(True)
    message: str = Field(..., description="Human readable message")
    timestamp: str = Field(..., description="ISO-8601 UTC timestamp")
