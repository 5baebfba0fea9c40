"""
Health API schemas.
"""
from typing import Dict

from pydantic import BaseModel, Field


class ComponentHealth(BaseModel):
    """Status of one dependency."""

    status: str = Field(..., description="healthy or unavailable")
    backend: str = Field(..., description="Implementation in use")


class HealthResponse(BaseModel):
    """Overall service health."""

    status: str = Field(..., description="healthy or degraded")
    version: str
    components: Dict[str, ComponentHealth]
