"""
Database models package.
"""
from app.models.base import Base
from app.models.organization import Organization, OrganizationStatus
from app.models.user import User, UserRole, AccountType
from app.models.photo import Photo, PhotoCategory, Visibility
from app.models.document import Document, DocumentType

__all__ = [
    "Base",
    "Organization",
    "OrganizationStatus",
    "User",
    "UserRole",
    "AccountType",
    "Photo",
    "PhotoCategory",
    "Visibility",
    "Document",
    "DocumentType",
]
