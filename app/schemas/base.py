"""Base schemas for the application."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema class with common configuration."""
    model_config = ConfigDict(from_attributes=True)


class CamelSchema(BaseSchema):
    """Schema serialized with camelCase keys, as the client expects."""
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseSchema):
    """Plain confirmation message."""
    message: str


class HealthResponse(BaseSchema):
    """Liveness marker."""
    status: str = "OK"
    message: str = "Server is running"
