"""Health check schemas."""

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str
    ai_fallback_enabled: bool
    site_profiles: int
