"""
Health check endpoint schemas.

The health endpoint is PUBLIC (no authentication required).
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Response model for GET /health.

    ``completion`` tells operators whether recommendation requests will try
    the completion backend or go straight to the local scorer.
    """

    status: str = Field(
        default="ok",
        description="Health status of the API (always 'ok' if responding)",
        examples=["ok"]
    )
    service: str = Field(
        default="planter-backend",
        description="Service name",
    )
    completion: str = Field(
        ...,
        description="'external' when a completion backend is configured, 'local' otherwise",
        examples=["external", "local"]
    )
