"""
Pydantic schemas for photo endpoints.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class PhotoConfirmRequest(CamelModel):
    """Body sent after the browser finished its PUT to storage."""
    file_key: Optional[str] = None
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    alt_text: Optional[str] = None
    visibility: Optional[str] = Field(None, description="'all' (default) or 'owner_only'")


class PhotoResponse(CamelModel):
    """Schema for photo response."""
    id: str
    organization_id: Optional[str] = None
    uploaded_by: str
    file_key: str
    file_url: str
    file_name: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    category: str
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    alt_text: Optional[str] = None
    visibility: Optional[str] = None
    created_at: datetime


class PhotoEnvelope(CamelModel):
    photo: PhotoResponse


class PhotoListResponse(CamelModel):
    photos: List[PhotoResponse]
