"""
Photo model for client-uploaded assets.

Stores metadata about files uploaded to R2 storage.
The actual file bytes are stored in R2, not the database.

Lifecycle:
1. Client requests an upload slot (no row yet)
2. Client uploads to R2 directly
3. Client confirms the upload -> row inserted
4. Explicit delete removes the R2 object (best effort) and the row

Rows are never edited in place.
"""
import enum
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, JSON, Index

from app.models.base import Base, generate_uuid, utcnow


class Visibility(str, enum.Enum):
    """
    Who inside the organization may see an asset.

    NULL in the database marks legacy rows created before the flag existed.
    """
    ALL = "all"
    OWNER_ONLY = "owner_only"


class PhotoCategory(str, enum.Enum):
    """Categories offered by the portal UI. Storage keys accept any category."""
    UNCATEGORIZED = "uncategorized"
    TRAINER = "trainer"
    FACILITY = "facility"
    EVENT = "event"
    MARKETING = "marketing"
    PRODUCT = "product"
    TEAM = "team"
    OTHER = "other"


class Photo(Base):
    """
    Photo metadata model.

    Attributes:
        id: Unique identifier (UUID)
        organization_id: Owning organization; NULL scopes the photo to its uploader
        uploaded_by: User who confirmed the upload
        file_key: R2 object key, unique and immutable
        file_url: Public URL of the object
        file_name: Original filename as reported by the browser
        file_size: Size in bytes
        mime_type: Content type
        category: Free category label (defaults to "uncategorized")
        notes: User notes about the photo
        tags: SEO tags / keywords
        alt_text: Optional alt text
        visibility: "all", "owner_only" or NULL (legacy, visible)
        created_at: When the upload was confirmed
    """
    __tablename__ = "photos"

    id = Column(String, primary_key=True, default=generate_uuid)
    organization_id = Column(String, ForeignKey("organizations.id"), nullable=True)
    uploaded_by = Column(String, ForeignKey("users.id"), nullable=False)

    # Example: org-<org_id>/headshots/<user_id>-1718000000000-photo.jpg
    file_key = Column(String, nullable=False, unique=True)
    file_url = Column(String, nullable=False)
    file_name = Column(String, nullable=False)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String, nullable=True)

    category = Column(String(64), nullable=False, default=PhotoCategory.UNCATEGORIZED.value)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    alt_text = Column(Text, nullable=True)
    visibility = Column(String(16), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('ix_photos_org_created', 'organization_id', 'created_at'),
        Index('ix_photos_uploader_created', 'uploaded_by', 'created_at'),
    )

    def __repr__(self):
        return f"<Photo(id={self.id}, key={self.file_key}, visibility={self.visibility})>"
