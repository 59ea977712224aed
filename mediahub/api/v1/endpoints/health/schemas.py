"""Health check API schemas."""

from typing import Dict

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Basic health check response schema."""

    status: str = Field(
        ...,
        description="Service health status",
        examples=["healthy"]
    )
    timestamp: str = Field(
        ...,
        description="Response timestamp",
        examples=["2024-01-01T12:00:00Z"]
    )


class DetailedHealthResponse(HealthResponse):
    """Detailed health check response schema."""

    services: Dict[str, str] = Field(
        ...,
        description="Status of individual dependencies",
        examples=[{"database": "healthy", "media_storage": "healthy"}]
    )
    version: str = Field(..., examples=["1.0.0"])
    uptime: str = Field(
        ...,
        description="Time since the process started",
        examples=["2 days, 14:30:15"]
    )
