"""Health check response schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for liveness probe."""

    status: str = Field(..., description="Health status")


class ReadinessResponse(BaseModel):
    """Response for readiness probe with dependency checks."""

    status: str = Field(..., description="Overall status (ok, degraded)")
    checks: dict[str, str] = Field(
        default_factory=dict,
        description="Per-check results (ok, timeout, error, skipped)",
    )
    item_count: int | None = Field(
        None, description="Number of stored items, when the table is readable"
    )
