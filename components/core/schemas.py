"""Core schemas for the application."""

from typing import Dict
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that reads snake_case attributes and speaks camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class HealthCheck(CamelModel):
    """Schema for health check response."""
    success: bool
    service_name: str
    status: str
    message: str
    timestamp: str


class ServiceInfo(CamelModel):
    """Schema for the root endpoint."""
    success: bool = True
    message: str
    version: str
    endpoints: Dict[str, str]
