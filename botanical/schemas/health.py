"""Health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness of the botanical API and reachability of its account store."""

    status: Literal["ok"] = Field(default="ok", description="Always 'ok' when the API answers")
    service: str = Field(default="botanical-api", description="Name reported by this deployment")
    environment: str = Field(description="APP_ENV of the running process")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Whether the users table's database answered SELECT 1",
    )
