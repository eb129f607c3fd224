"""
Pydantic schemas for the dashboard endpoint.
"""
from datetime import datetime
from typing import List, Optional

from app.schemas.common import CamelModel


class DashboardStats(CamelModel):
    photo_count: int
    photos_this_week: int
    document_count: int
    document_types: List[str]


class ActivityEntry(CamelModel):
    """One line of the recent activity feed."""
    type: str
    action: str
    item: str
    created_at: datetime


class DashboardResponse(CamelModel):
    stats: DashboardStats
    recent_activity: List[ActivityEntry]
    organization_name: Optional[str] = None
    is_admin: bool
