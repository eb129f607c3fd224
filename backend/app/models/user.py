"""
User model.
Authenticated via Firebase (firebase_uid); role and account type drive
what the user can see inside their organization.
"""
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Index

from app.models.base import Base, generate_uuid, utcnow


class UserRole(str, enum.Enum):
    """System-wide role."""
    ADMIN = "admin"
    STAFF = "staff"
    CLIENT = "client"


class AccountType(str, enum.Enum):
    """Account type within an organization."""
    TEAM_LEAD = "team_lead"      # Full access to the organization's assets
    TEAM_MEMBER = "team_member"  # Restricted to assets visible to all


class User(Base):
    """Portal user."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    firebase_uid = Column(String(128), nullable=False, unique=True)  # Firebase user ID
    email = Column(String(255), nullable=True)  # Email from Firebase token
    name = Column(String(255), nullable=True)
    role = Column(String(16), nullable=False, default=UserRole.CLIENT.value)
    account_type = Column(String(16), nullable=True, default=AccountType.TEAM_MEMBER.value)
    organization_id = Column(String, ForeignKey("organizations.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Index on firebase_uid for fast lookups
    __table_args__ = (
        Index("idx_user_firebase_uid", "firebase_uid"),
    )

    def __repr__(self):
        return f"<User(id={self.id}, role={self.role}, organization={self.organization_id})>"
