"""
Document model (contracts, invoices, roadmaps...).

Same storage lifecycle as photos. Legacy rows without a visibility flag fall
back to the default for their document type.
"""
import enum
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Index

from app.models.base import Base, generate_uuid, utcnow
from app.models.photo import Visibility


class DocumentType(str, enum.Enum):
    CONTRACT = "contract"
    ROADMAP = "roadmap"
    INVOICE = "invoice"
    PROPOSAL = "proposal"
    OTHER = "other"


# Visibility applied when a document is saved without an explicit flag,
# and assumed for legacy rows whose flag is NULL.
DEFAULT_DOCUMENT_VISIBILITY = {
    DocumentType.CONTRACT: Visibility.OWNER_ONLY,
    DocumentType.INVOICE: Visibility.OWNER_ONLY,
    DocumentType.PROPOSAL: Visibility.OWNER_ONLY,
    DocumentType.ROADMAP: Visibility.ALL,
    DocumentType.OTHER: Visibility.ALL,
}


def default_visibility_for(document_type: str) -> Visibility:
    """Default visibility for a document type; unknown types are visible to all."""
    try:
        return DEFAULT_DOCUMENT_VISIBILITY[DocumentType(document_type)]
    except ValueError:
        return Visibility.ALL


class Document(Base):
    """Document metadata model. File bytes live in R2."""

    __tablename__ = "documents"

    id = Column(String, primary_key=True, default=generate_uuid)
    organization_id = Column(String, ForeignKey("organizations.id"), nullable=True)
    uploaded_by = Column(String, ForeignKey("users.id"), nullable=False)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(16), nullable=True, default=DocumentType.OTHER.value)

    file_key = Column(String, nullable=False, unique=True)
    file_url = Column(String, nullable=False)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String, nullable=True)
    visibility = Column(String(16), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('ix_documents_org_created', 'organization_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Document(id={self.id}, type={self.type}, visibility={self.visibility})>"
