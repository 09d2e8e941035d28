"""Pydantic models for API request/response schemas."""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class ChaosResponse(BaseModel):
    """Response model for the chaos flag."""
    chaos: bool


class ReporterStatus(BaseModel):
    """Response model for the periodic reporter."""
    state: str
    reporting: bool
    report_interval: float
    ticks: int
    pushes_succeeded: int
    pushes_failed: int
    last_push_at: Optional[float] = None
    last_error: Optional[str] = None


class MetricsStatusResponse(BaseModel):
    """Response model for the metrics overview."""
    source: str
    reporter: ReporterStatus
    collectors: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Current counter values per collector",
    )
