"""
Shared pydantic schema pieces.

The browser speaks camelCase JSON; models are declared in snake_case and
aliased with pydantic's to_camel generator.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    """Schema for delete responses."""
    success: bool = True


class ErrorResponse(BaseModel):
    """Body rendered for every domain error."""
    error: str


class MeResponse(CamelModel):
    """Schema for the authenticated caller."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str
    account_type: Optional[str] = None
    organization_id: Optional[str] = None
