"""
Organization model - the tenant boundary.
Users and the assets they upload are grouped by organization.
"""
import enum
from sqlalchemy import Column, String, DateTime

from app.models.base import Base, generate_uuid, utcnow


class OrganizationStatus(str, enum.Enum):
    LEAD = "lead"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class Organization(Base):
    """Client organization (company) using the portal."""

    __tablename__ = "organizations"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    status = Column(String(16), nullable=False, default=OrganizationStatus.LEAD.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Organization(id={self.id}, slug={self.slug})>"
