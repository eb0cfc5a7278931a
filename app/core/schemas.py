from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field
from datetime import datetime, timezone

T = TypeVar("T")

class ApiResponse(BaseModel, Generic[T]):
    """
    Envelope for computed (non-persisted) results such as previews.
    `warnings` lists lookups that fell back to defaults while computing `data`.
    Failures never use this model; they go through the exception handlers.
    """
    success: bool = True
    data: Optional[T] = None
    warnings: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def ok(cls, data: T, warnings: Optional[List[str]] = None) -> "ApiResponse[T]":
        return cls(success=True, data=data, warnings=warnings or [])
