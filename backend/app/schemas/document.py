"""
Pydantic schemas for document endpoints.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class DocumentConfirmRequest(CamelModel):
    """Body sent after a document upload completed."""
    file_key: Optional[str] = None
    name: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    type: Optional[str] = Field(None, description="contract, invoice, proposal, roadmap or other")
    description: Optional[str] = None
    visibility: Optional[str] = Field(None, description="Defaults by document type")


class DocumentResponse(CamelModel):
    """Schema for document response."""
    id: str
    organization_id: Optional[str] = None
    uploaded_by: str
    name: str
    description: Optional[str] = None
    type: Optional[str] = None
    file_key: str
    file_url: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    visibility: Optional[str] = None
    created_at: datetime


class DocumentEnvelope(CamelModel):
    document: DocumentResponse


class DocumentListResponse(CamelModel):
    documents: List[DocumentResponse]
