"""Health check API schemas."""

from pydantic import BaseModel, Field

from app.shared.utils import utc_now_iso


class CacheStatus(BaseModel):
    """Response cache subsystem state, as reported by health and sync status."""

    enabled: bool = Field(..., description="True when Redis is reachable and caching is active")
    type: str = Field(..., description="'redis' or 'none'")


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    success: bool = True
    status: str = Field(default="healthy", description="Service status")
    message: str = "Server is running"
    timestamp: str = Field(default_factory=utc_now_iso)


class ServerInfo(BaseModel):
    uptime: float = Field(..., description="Seconds since process start")
    environment: str
    python_version: str = Field(..., serialization_alias="pythonVersion")
    platform: str


class DetailedHealthResponse(BaseModel):
    """Response for GET /health/detailed."""

    success: bool = True
    status: str = "healthy"
    timestamp: str = Field(default_factory=utc_now_iso)
    server: ServerInfo
    cache: CacheStatus


class LivenessResponse(BaseModel):
    """Response for GET /health/live."""

    success: bool = True
    alive: bool = True
    message: str = "Server is alive"
    uptime: float


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready. The response cache is optional, so it never blocks readiness."""

    success: bool = True
    ready: bool = True
    message: str = "Server is ready"
