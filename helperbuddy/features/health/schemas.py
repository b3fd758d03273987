"""Health check response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Liveness response.

    Example:
        ```json
        {"status": "OK", "message": "HelperBuddy API is running!"}
        ```
    """

    status: str = Field(default="OK", description="Always OK while the process serves requests")
    message: str = Field(default="HelperBuddy API is running!")

    model_config = ConfigDict(
        json_schema_extra={"example": {"status": "OK", "message": "HelperBuddy API is running!"}},
    )


class ReadinessResponse(BaseModel):
    """Readiness response with per-dependency checks."""

    ready: bool
    checks: dict[str, bool] = Field(default_factory=dict)
    scheduler_running: bool = False
